"""Declarative element locators compiled to XPath.

A Locator is a chain of XPath steps. The first step searches the whole
document; every later step runs relative to the first match of the chain so
far, so a search scoped to one card never sees a sibling card's elements.
"""

from dataclasses import dataclass

from failures import ElementNotFound


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def attr_equals(name: str, value: str) -> str:
    return f"@{name}={xpath_literal(value)}"


def attr_contains(name: str, value: str) -> str:
    return f"contains(@{name}, {xpath_literal(value)})"


def text_contains(text: str) -> str:
    return f"contains(., {xpath_literal(text)})"


def own_text_contains(text: str) -> str:
    # text() only looks at the element's direct text nodes
    return f"contains(text(), {xpath_literal(text)})"


def text_is(text: str) -> str:
    return f"normalize-space(.)={xpath_literal(text)}"


def not_(predicate: str) -> str:
    return f"not({predicate})"


def _step(axis: str, tag: str, predicates) -> str:
    return axis + tag + "".join(f"[{p}]" for p in predicates)


@dataclass(frozen=True)
class Locator:
    steps: tuple[str, ...]
    description: str

    def __str__(self) -> str:
        return self.description

    def where(self, *predicates: str) -> "Locator":
        last = self.steps[-1] + "".join(f"[{p}]" for p in predicates)
        return Locator(self.steps[:-1] + (last,), self.description)

    def having(self, inner: "Locator") -> "Locator":
        """Match only elements that contain something matching ``inner``."""
        if len(inner.steps) != 1:
            raise ValueError(f"Cannot nest a scoped locator inside another: {inner}")
        nested = "." + inner.steps[0]
        return Locator(
            self.steps[:-1] + (self.steps[-1] + f"[{nested}]",),
            f"{self.description} containing {inner.description}",
        )

    def ancestor(self, tag: str, *predicates: str) -> "Locator":
        # [1] on a reverse axis selects the nearest ancestor
        step = _step("ancestor::", tag, predicates) + "[1]"
        label = tag + "".join(f"[{p}]" for p in predicates)
        return Locator(self.steps + (step,), f"{label} around {self.description}")

    def descendant(self, inner: "Locator") -> "Locator":
        first, *rest = inner.steps
        relative = "." + first if first.startswith("/") else first
        return Locator(
            self.steps + (relative, *rest),
            f"{inner.description} inside {self.description}",
        )


def by_tag(tag: str) -> Locator:
    return Locator((f"//{tag}",), f"<{tag}>")


def by_attribute(tag: str, attribute: str, value: str, contains: bool = False) -> Locator:
    predicate = attr_contains(attribute, value) if contains else attr_equals(attribute, value)
    op = "*=" if contains else "="
    return Locator((_step("//", tag, [predicate]),), f"<{tag} {attribute}{op}{value!r}>")


def by_text(tag: str, text: str, exact: bool = False, own: bool = False) -> Locator:
    if exact:
        predicate = text_is(text)
    elif own:
        predicate = own_text_contains(text)
    else:
        predicate = text_contains(text)
    return Locator((_step("//", tag, [predicate]),), f"<{tag}> with text {text!r}")


def bind(page, locator: Locator):
    """Return a Playwright locator, binding each scope to its first match."""
    handle = page.locator(f"xpath={locator.steps[0]}")
    for step in locator.steps[1:]:
        handle = handle.first.locator(f"xpath={step}")
    return handle


async def find(page, locator: Locator):
    handle = bind(page, locator)
    if await handle.count() == 0:
        raise ElementNotFound(locator)
    return handle.first


async def find_all(page, locator: Locator) -> list:
    return await bind(page, locator).all()
