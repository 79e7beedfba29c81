"""
Recovering JSON objects from model replies.

Replies often wrap the JSON in prose or code fences and are sometimes cut off
when the model runs out of tokens. Each step here is a plain function over
the reply text so the reconciler can chain them.
"""

import json
import logging
import re
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)

CLOSERS = {'{': '}', '[': ']'}
TRAILING_SEPARATOR = re.compile(r',\s*$')
# A key with no value yet: {"a": 1, "b"   or   {"b":
DANGLING_KEY = re.compile(r'([{,])\s*"(?:[^"\\]|\\.)*"\s*:?\s*$')


def extract_json_span(text: str) -> Optional[str]:
    """
    Outermost {...} span of the text.

    When no closing brace follows the first opening brace the reply was cut
    off, and everything from that brace on is returned.
    """
    if not text:
        return None
    start = text.find('{')
    if start == -1:
        return None
    end = text.rfind('}')
    if end > start:
        return text[start:end + 1]
    return text[start:]


def _scan(text: str) -> Tuple[List[str], bool, bool]:
    """Open containers, whether a string is open, whether it ends on an escape"""
    stack = []
    in_string = False
    escape = False
    for char in text:
        if in_string:
            if escape:
                escape = False
            elif char == '\\':
                escape = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in CLOSERS:
            stack.append(char)
        elif char in ('}', ']'):
            if stack and CLOSERS[stack[-1]] == char:
                stack.pop()
    return stack, in_string, escape


def looks_truncated(text: str) -> bool:
    stack, in_string, _ = _scan(text)
    return bool(stack) or in_string or bool(TRAILING_SEPARATOR.search(text))


def repair_truncated_json(text: str) -> str:
    """
    Close a JSON document that was cut off.

    Closes an open string, drops a dangling key or trailing separator, then
    appends the closing brackets still open, innermost first.
    """
    repaired = text.rstrip()
    stack, in_string, escape = _scan(repaired)

    if in_string:
        if escape:
            repaired = repaired[:-1]
        repaired += '"'

    if stack and stack[-1] == '{':
        repaired = DANGLING_KEY.sub(r'\1', repaired)
    repaired = TRAILING_SEPARATOR.sub('', repaired)

    stack, _, _ = _scan(repaired)
    repaired += ''.join(CLOSERS[opener] for opener in reversed(stack))
    return repaired


def parse_json_object(text: str) -> Optional[dict]:
    """
    Parse the JSON object embedded in a reply, repairing it once if it was
    truncated. Returns None when no object can be recovered.
    """
    span = extract_json_span(text)
    if span is None:
        logger.info("No JSON object found in response")
        return None

    try:
        data = json.loads(span)
    except (json.JSONDecodeError, RecursionError) as e:
        if not looks_truncated(span):
            logger.info(f"Response JSON is invalid and not repairable: {e}")
            return None
        repaired = repair_truncated_json(span)
        try:
            data = json.loads(repaired)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.info(f"Repaired JSON still invalid: {e}")
            return None
        logger.info("Repaired potentially truncated JSON")

    if not isinstance(data, dict):
        return None
    return data
