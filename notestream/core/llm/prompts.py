"""
Prompt templates for each streaming request kind.
"""

from notestream.models.session import GenerationRequest, RequestKind

SUMMARIZE_PROMPT = (
    "Write a short, casual summary of the following text. "
    "Keep it brief and to the point:\n\n---\n\n{text}"
)

ASK_PROMPT = "Answer this question quickly and casually, straight to the point:\n\n{text}"

DESCRIBE_IMAGE_PROMPT = 'Describe this image in a casual tone. The question is: "{text}"'

SUMMARIZE_AUDIO_PROMPT = "Listen to this voice note and write a short, casual summary of it."


def build_prompt(request: GenerationRequest) -> str:
    """
    Render the text part of a request.

    Args:
        request: Operation descriptor

    Returns:
        Prompt text sent alongside any media part
    """
    if request.kind == RequestKind.SUMMARIZE:
        return SUMMARIZE_PROMPT.format(text=request.text)
    if request.kind == RequestKind.ASK:
        return ASK_PROMPT.format(text=request.text)
    if request.kind == RequestKind.DESCRIBE_IMAGE:
        return DESCRIBE_IMAGE_PROMPT.format(text=request.text)
    if request.kind == RequestKind.SUMMARIZE_AUDIO:
        return SUMMARIZE_AUDIO_PROMPT
    raise ValueError(f"Unsupported request kind: {request.kind}")
