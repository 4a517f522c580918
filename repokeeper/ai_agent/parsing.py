"""
Helpers for turning free-form model output into JSON.
"""
import json
import re
from typing import Any, Dict, List, Union


class AIResponseParseError(ValueError):
    """Raised when a model response does not contain the expected JSON."""


def extract_json_from_response(content: str) -> str:
    """
    Extract JSON from a response that may be wrapped in markdown code blocks.
    Handles responses like: ```json\n{...}\n```
    """
    if not content:
        return content

    # Match ```json or ``` followed by JSON content
    for match in re.findall(r'```(?:json)?\s*\n?([\s\S]*?)\n?```', content):
        match = match.strip()
        if (match.startswith('{') and match.endswith('}')) or (match.startswith('[') and match.endswith(']')):
            return match

    content = content.strip()
    if content.startswith('```'):
        lines = content.split('\n')[1:]
        if lines and lines[-1].strip() == '```':
            lines = lines[:-1]
        content = '\n'.join(lines)

    # If no code blocks, return original (might be plain JSON)
    return content.strip()


def parse_json(content: str) -> Union[Dict[str, Any], List[Any]]:
    """Parse a model response as JSON, tolerating markdown fences and leading prose."""
    text = extract_json_from_response(content or "")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Models sometimes wrap the payload in a sentence; take the outermost object/array
    for opener, closer in (('{', '}'), ('[', ']')):
        start, end = text.find(opener), text.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue

    raise AIResponseParseError(f"Could not parse JSON from response: {text[:100]!r}")


def parse_assessment(content: str) -> Dict[str, Any]:
    """
    Parse a ``{score, assessment}`` payload.

    A ``{response}`` envelope (as returned by prompt servers) is unwrapped
    first. Returns a dict with a float ``score`` and a string ``assessment``.
    """
    data = parse_json(content)
    if isinstance(data, dict) and 'response' in data and 'score' not in data:
        inner = data['response']
        data = parse_json(inner) if isinstance(inner, str) else inner

    if not isinstance(data, dict) or 'score' not in data:
        raise AIResponseParseError("Response is missing the 'score' field")

    try:
        score = float(data['score'])
    except (TypeError, ValueError) as e:
        raise AIResponseParseError(f"Invalid score: {data['score']!r}") from e

    return {
        'score': max(0.0, min(score, 100.0)),
        'assessment': str(data.get('assessment', '')).strip(),
    }
