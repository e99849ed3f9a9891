"""Source transformations applied before rendering."""

import re

CFG_TEST_ATTRIBUTE = "#[cfg(test)]"

# Module header directly following the attribute, e.g. "\nmod tests {" or "\npub(crate) mod tests {"
_TEST_MODULE_HEADER = re.compile(r"\s*(?:pub(?:\([^)]*\))?\s+)?mod\s+tests\s*\{")


def strip_rust_test_modules(source: str) -> str:
    """Remove every ``#[cfg(test)] mod tests { ... }`` block from Rust source.

    The attribute, the module header and its body up to the matching closing brace
    are dropped. Braces are counted naively, so braces inside string literals or
    comments in a test module can end the match early. An attribute that is not
    directly followed by a ``mod tests`` block is dropped on its own.

    Args:
        source: Rust source code.

    Returns:
        The source without its unit test modules.

    Example:
        >>> code = 'fn add() {}\\n#[cfg(test)]\\nmod tests {\\n    #[test]\\n    fn t() { assert!(true); }\\n}\\n'
        >>> strip_rust_test_modules(code)
        'fn add() {}\\n\\n'
    """
    result = []
    position = 0
    length = len(source)

    while position < length:
        start = source.find(CFG_TEST_ATTRIBUTE, position)
        if start == -1:
            result.append(source[position:])
            break

        result.append(source[position:start])
        after_attribute = start + len(CFG_TEST_ATTRIBUTE)

        header = _TEST_MODULE_HEADER.match(source, after_attribute)
        if header is None:
            position = after_attribute
            continue

        depth = 1
        cursor = header.end()
        while cursor < length and depth:
            if source[cursor] == "{":
                depth += 1
            elif source[cursor] == "}":
                depth -= 1
            cursor += 1
        position = cursor

    return "".join(result)
