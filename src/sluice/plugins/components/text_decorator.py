"""Text decorator component: changes the case of a string."""

from typing import Any, Literal

from sluice.plugins.base import BaseComponent
from sluice.plugins.config_base import ComponentConfig


class TextDecoratorConfig(ComponentConfig):
    """Settings for text_decorator."""

    mode: Literal["uppercase", "lowercase"]


class TextDecorator(BaseComponent):
    """Upper- or lower-cases the incoming text.

    Ports:
        inputs.text: string
        outputs.text: string
    """

    name = "text_decorator"
    config_model = TextDecoratorConfig
    inputs = {"text": {"type": "string"}}
    outputs = {"text": {"type": "string"}}

    config: TextDecoratorConfig

    async def run(self, inputs: dict[str, Any], settings: Any) -> dict[str, Any]:
        text: str = inputs["text"]
        if self.config.mode == "uppercase":
            return {"text": text.upper()}
        return {"text": text.lower()}
