"""
Entry point for the background storybook worker
Run: python run_worker.py
"""
import sys
from pathlib import Path

from dotenv import load_dotenv
from redis import Redis
from rq import Queue, Worker

load_dotenv()

# Add src to path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))


def main() -> None:
    from api.queue import QUEUE_NAME
    from utils.config_loader import get_settings

    conn = Redis.from_url(get_settings().redis_url)
    queues = [Queue(QUEUE_NAME, connection=conn)]
    worker = Worker(queues, connection=conn)
    worker.work()


if __name__ == "__main__":
    main()
