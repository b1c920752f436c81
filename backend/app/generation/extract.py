"""JSON extraction from unstructured generation output.

Models often wrap the requested JSON object in prose or code fences. The
extractor keeps everything from the first ``{`` to the last ``}``.

Known limitation: this is not a tokenizer. A brace inside prose before the
real object, or after it, widens the slice and decoding then fails. The model
is instructed to emit JSON only, so the cheap heuristic is kept as-is.
"""


def extract_json(raw_text: str) -> str:
    """Return the substring between the first '{' and the last '}' inclusive.

    Returns the input unchanged when no such span exists, so the decoder
    reports a parse error on the original text.
    """
    start = raw_text.find("{")
    if start == -1:
        return raw_text

    end = raw_text.rfind("}")
    if end <= start:
        return raw_text

    return raw_text[start : end + 1]
