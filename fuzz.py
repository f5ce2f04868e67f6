#!/usr/bin/env python3
"""
Random fuzzer for the HTML truncator.
Generates well-formed documents and checks properties every truncation must keep.
"""

import argparse
import random
import re
import string
import sys
import time
import traceback
from html.parser import HTMLParser

from htmlsnip import MarkupMismatchError, truncate
from htmlsnip.constants import OPTIONAL_CLOSING_ELEMENTS, VOID_ELEMENTS

# Fuzzing vocabulary
TAGS = [
    "div", "span", "p", "a", "b", "i", "em", "strong", "ul", "ol", "table", "tr", "td",
    "h1", "h2", "h3", "blockquote", "article", "section", "header", "footer", "nav",
    "figure", "figcaption", "details", "summary", "code", "pre", "small", "u", "s",
]
VOID_TAGS = ["br", "hr", "img", "input", "wbr", "meta", "source"]
LIST_ITEM = "li"

ATTRIBUTES = ["id", "class", "href", "src", "alt", "title", "data-x", "role", "hidden"]

WORD_CHARS = string.ascii_letters + "éüßЖα"
UNCASED_CHARS = "日本語กข"
DIGITS = string.digits
PUNCTUATION = ".,!?-:'\"()"
SPACES = [" ", " ", " ", "\t", "\n"]

ENTITIES = [
    "&amp;", "&lt;", "&gt;", "&quot;", "&nbsp;", "&eacute;", "&Uuml;", "&szlig;",
    "&copy;", "&hellip;", "&#169;", "&#x3C;", "&#233;", "&#x1F600;", "&unknown;",
    "&notin;", "&CounterClockwiseContourIntegral;",
]

SUFFIX = "[...]"

# One visible unit per match, except tags (none) and comments (their body).
VISIBLE_TOKEN = re.compile(r"<!--(.*?)-->|</?[A-Za-z][^>]*>|&[^\s<&;]+;|.", re.S)
# An "&" followed by reference characters but no ";" is a reference cut in half.
SPLIT_REFERENCE = re.compile(r"&[#A-Za-z0-9]+(?![#A-Za-z0-9;])")

UNCLOSED_IN_OUTPUT = frozenset(VOID_ELEMENTS) | frozenset(OPTIONAL_CLOSING_ELEMENTS)


def random_string(min_len=0, max_len=20, alphabet=string.ascii_letters + string.digits):
    """Generate random string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(alphabet, k=length))


def random_word():
    strategies = [
        lambda: random_string(1, 10, WORD_CHARS),
        lambda: random_string(1, 4, DIGITS),
        lambda: random_string(1, 4, UNCASED_CHARS),
        lambda: random_string(1, 3, WORD_CHARS) + random.choice(ENTITIES) + random_string(0, 3, WORD_CHARS),
        lambda: random.choice(ENTITIES),
        lambda: random_string(1, 6, WORD_CHARS) + random.choice(PUNCTUATION),
        lambda: "&",  # bare ampersand, always followed by a space
    ]
    return random.choice(strategies)()


def random_text(min_words=0, max_words=8):
    words = [random_word() for _ in range(random.randint(min_words, max_words))]
    return "".join(word + random.choice(SPACES) for word in words)


def random_attributes():
    attrs = []
    for _ in range(random.randint(0, 3)):
        name = random.choice(ATTRIBUTES)
        style = random.choice(['="{}"', "='{}'", "={}", ""])
        attrs.append(" " + name + style.format(random_string(0, 8)))
    return "".join(attrs)


def random_comment():
    body = random_string(0, 15, string.ascii_letters + " ")
    return f"<!--{body}-->"


def random_element(depth=0):
    """Generate a balanced element; depth bounds the nesting."""
    roll = random.random()
    if roll < 0.15:
        closing = "/" if random.random() < 0.3 else ""
        return f"<{random.choice(VOID_TAGS)}{random_attributes()}{closing}>"
    if roll < 0.2:
        return f"<{random.choice(TAGS)}{random_attributes()}/>"
    if roll < 0.25:
        return random_comment()

    tag = random.choice(TAGS)
    if random.random() < 0.2:
        tag = tag.upper()
    if tag.lower() in ("ul", "ol") and random.random() < 0.5:
        # List items with and without their optional closing tag
        items = []
        for _ in range(random.randint(1, 4)):
            close = f"</{LIST_ITEM}>" if random.random() < 0.5 else ""
            items.append(f"<{LIST_ITEM}>{random_text(1, 3)}{close}")
        return f"<{tag}>{''.join(items)}</{tag}>"

    return f"<{tag}{random_attributes()}>{random_content(depth + 1)}</{tag}>"


def random_content(depth=0):
    parts = []
    for _ in range(random.randint(0, 4)):
        if depth < 4 and random.random() < 0.5:
            parts.append(random_element(depth))
        else:
            parts.append(random_text())
    return "".join(parts)


def generate_document():
    """Generate a random balanced HTML fragment."""
    return random_content()


def visible_length(html, skip_whitespace=False):
    count = 0
    for match in VISIBLE_TOKEN.finditer(html):
        token = match.group(0)
        if token.startswith("<!--"):
            count += len(match.group(1))
        elif token.startswith("<") and len(token) > 1:
            continue
        elif skip_whitespace and token in " \t\r\n":
            continue
        else:
            count += 1
    return count


class BalanceChecker(HTMLParser):
    """Record the first nesting violation in a fragment."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.stack = []
        self.problem = None

    def handle_starttag(self, tag, attrs):
        if tag not in UNCLOSED_IN_OUTPUT:
            self.stack.append(tag)

    def handle_startendtag(self, tag, attrs):
        pass

    def handle_endtag(self, tag):
        if tag in UNCLOSED_IN_OUTPUT:
            return
        if not self.stack or self.stack[-1] != tag:
            if self.problem is None:
                self.problem = f"unexpected </{tag}> with open {self.stack}"
            return
        self.stack.pop()


def balance_problem(html):
    checker = BalanceChecker()
    checker.feed(html)
    checker.close()
    if checker.problem:
        return checker.problem
    if checker.stack:
        return f"unclosed {checker.stack}"
    return None


def check_properties(html, length, break_words, enclose):
    """Return a list of violated properties for one truncation."""
    problems = []
    plain = truncate(html, length, break_words=break_words)
    with_suffix = truncate(
        html, length, SUFFIX, break_words=break_words, enclose_suffix_in_tags=enclose
    )

    problem = balance_problem(plain)
    if problem:
        problems.append(f"unbalanced output: {problem}")

    shown = visible_length(plain)
    if shown > length:
        problems.append(f"visible length {shown} exceeds {length}")

    if SPLIT_REFERENCE.search(plain):
        problems.append("character reference split")

    copies = with_suffix.count(SUFFIX)
    if copies > 1:
        problems.append(f"suffix appears {copies} times")
    if with_suffix.replace(SUFFIX, "", 1) != plain:
        problems.append("suffix changed the rest of the output")

    # Whitespace left unwritten is not a cut
    truncated = visible_length(plain, skip_whitespace=True) < visible_length(html, skip_whitespace=True)
    if truncated != (copies == 1):
        problems.append(f"suffix presence {copies == 1} but truncated={truncated}")

    if length > visible_length(html) and plain != html:
        problems.append("output differs from an input that fits")

    return problems


def check_plain_text_prefix(length):
    text = random_text(0, 12).replace("&", "and")
    result = truncate(text, length)
    if result != text[:length]:
        return [f"plain text {text!r} at {length} gave {result!r}"]
    return []


def run_fuzzer(num_tests=1000, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer and report results."""
    if seed is not None:
        random.seed(seed)
    else:
        seed = random.randint(0, 2**32 - 1)
        random.seed(seed)
        print(f"Using seed: {seed}")

    crashes = []
    violations = []
    hangs = []
    successes = 0

    print(f"Fuzzing truncate with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_document()
        length = random.randint(0, visible_length(html) + 3)
        break_words = random.random() < 0.5
        enclose = random.random() < 0.5

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            problems = check_properties(html, length, break_words, enclose)
            problems += check_plain_text_prefix(length)
            elapsed = time.perf_counter() - start
        except MarkupMismatchError as e:
            problems = [f"mismatch error on balanced input: {e}"]
            elapsed = 0.0
        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "length": length,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "length": length, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        if problems:
            violations.append({
                "test_num": i,
                "html": html,
                "length": length,
                "options": f"break_words={break_words} enclose={enclose}",
                "problems": problems,
            })
            if verbose:
                print(f"  VIOLATION: Test {i}: {problems[0]}")
        elif elapsed <= 5.0:
            successes += 1

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: truncate")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests / elapsed_total:.1f}" if elapsed_total else "")

    if crashes:
        print(f"\n{'=' * 60}")
        print("CRASH DETAILS:")
        print(f"{'=' * 60}")
        for crash in crashes[:10]:  # Show first 10
            print(f"\nTest #{crash['test_num']} (length {crash['length']}):")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if violations:
        print(f"\n{'=' * 60}")
        print("VIOLATION DETAILS:")
        print(f"{'=' * 60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']} (length {violation['length']}, {violation['options']}):")
            print(f"  HTML: {violation['html'][:200]!r}")
            for problem in violation["problems"]:
                print(f"  - {problem}")
        if len(violations) > 10:
            print(f"\n... and {len(violations) - 10} more violations")

    if hangs:
        print(f"\n{'=' * 60}")
        print("HANG DETAILS:")
        print(f"{'=' * 60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    if save_failures and (crashes or violations or hangs):
        filename = f"fuzz_failures_truncate_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write("Fuzzing results for truncate\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} (length {crash['length']}) ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} (length {violation['length']}) ===\n")
                f.write(f"Options: {violation['options']}\n")
                f.write(f"HTML:\n{violation['html']}\n")
                f.write("".join(f"- {problem}\n" for problem in violation["problems"]) + "\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not (crashes or violations or hangs)


def main():
    parser = argparse.ArgumentParser(description="Fuzz the HTML truncator with random documents")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample documents (no truncation)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_document())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
