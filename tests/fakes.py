"""Fakes shared by the translation pipeline and CLI tests.

FakeProvider stands in for a configured model adapter: it exposes
``get_model()`` returning an object with ``generate_object``, and lets each
test decide what a chunk request answers.
"""
import asyncio
import re

from potranslate.translator import TranslationItem

PROMPT_LINE_RE = re.compile(r'^(\d+)\. "(.*)"$', re.MULTILINE)


def prompt_items(prompt: str) -> list[tuple[int, str]]:
    return [
        (int(index), text.replace('\\"', '"'))
        for index, text in PROMPT_LINE_RE.findall(prompt)
    ]


class FakeModel:
    def __init__(self, provider: "FakeProvider"):
        self.provider = provider

    async def generate_object(self, *, system, prompt, schema):
        provider = self.provider
        provider.calls.append((system, prompt))
        provider.in_flight += 1
        provider.max_in_flight = max(provider.max_in_flight, provider.in_flight)
        try:
            await asyncio.sleep(0)
            items = provider.respond(prompt_items(prompt))
            return schema(translations=items)
        finally:
            provider.in_flight -= 1


class FakeProvider:
    name = "Fake"

    def __init__(self, respond):
        self.respond = respond
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def get_model(self) -> FakeModel:
        return FakeModel(self)


def reverse_all(items):
    return [TranslationItem(index=index, msgstr=text[::-1]) for index, text in items]


SAMPLE_PO = """\
# Translation file for the shop app
msgid ""
msgstr ""
"Content-Type: text/plain; charset=UTF-8\\n"
"Language: vi\\n"

#. Button label
#: src/cart.tsx:12
msgid "Add to cart"
msgstr ""

#: src/cart.tsx:20
#, javascript-format
msgid "Hello {name}"
msgstr ""

msgid "{0}"
msgstr ""

msgid "Already done"
msgstr "Da xong"

msgid "Checkout"
msgstr ""
"""
