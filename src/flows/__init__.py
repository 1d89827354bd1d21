"""
Generation flows
Orchestration of the agent and media calls behind each API endpoint.
"""
