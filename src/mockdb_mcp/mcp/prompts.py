import os
from functools import lru_cache


@lru_cache(maxsize=1)
def render_prompt() -> str:
    # The instruction ships with the tool catalog: prompts/prompts.md next to this package
    current_dir = os.path.dirname(os.path.abspath(__file__))
    prompts_path = os.path.join(current_dir, "..", "prompts", "prompts.md")
    with open(prompts_path, encoding="utf-8") as f:
        return f.read()
