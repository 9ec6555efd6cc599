"""
extractor.py - Response Payload Extraction
===========================================
The endpoint returns the credit position as an escaped XML message inside a
<Body> element. extract_body() cuts that element's content out of the raw
response and unescapes it back into markup.

The search is textual, not an XML parse. Only &lt; and &gt; are decoded;
downstream consumers of the output files expect every other entity
(&amp;, &quot;, ...) to stay as it is.
"""

from .errors import MalformedResponseError


BODY_OPEN = "<Body>"
BODY_CLOSE = "</Body>"


def extract_body(response_text: str) -> str:
    """
    Return the decoded text between the first <Body> and the </Body> after it.

    Raises:
        MalformedResponseError: If either tag is missing
    """
    open_at = response_text.find(BODY_OPEN)
    if open_at == -1:
        raise MalformedResponseError(
            f"No {BODY_OPEN} element in response: {response_text[:200]!r}"
        )

    start = open_at + len(BODY_OPEN)
    end = response_text.find(BODY_CLOSE, start)
    if end == -1:
        raise MalformedResponseError(
            f"No {BODY_CLOSE} after {BODY_OPEN} in response: {response_text[:200]!r}"
        )

    body = response_text[start:end]
    return body.replace("&lt;", "<").replace("&gt;", ">")
