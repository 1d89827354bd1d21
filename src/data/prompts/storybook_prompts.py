STORY_ANALYZER_PROMPT = """You are a master storyteller and film director.

Task: Analyze the story and break it down into distinct scenes.

For each scene:
1. Define the characters, setting and mood
2. Extract the exact narration text, including speaker dialogue (e.g., "Leo said: ...")
3. Write a detailed illustration prompt

Character consistency:
- First create a character sheet prompt for the main character
- Reference that character sheet in every scene's illustration prompt

Keep the scenes in story order.
"""

ART_STYLE = (
    "Charming children's storybook illustration, soft watercolor style, "
    "vibrant but gentle colors, rounded shapes, no sharp edges."
)

SCENE_ANIMATION_TEMPLATE = (
    "Animate this scene in a gentle, slow-panning Ken Burns style. "
    "Scene description: {illustration_prompt}"
)
