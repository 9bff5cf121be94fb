"""Card-scoped locators evaluated against a real dashboard DOM.

Steps are resolved the way ``locators.bind`` chains them in the browser:
the first step searches the document and every later step runs from the
first match of the steps before it.
"""

import pytest
from lxml import html

import scenarios as sc


DASHBOARD = """
<html><body>
  <nav><span>RoomCraft</span></nav>
  <h2>Your Recent Projects</h2>
  <div class="grid">
    <div class="bg-white rounded-xl shadow">
      <div class="p-4 flex flex-col">
        <h3 class="font-bold text-lg">Alpha</h3>
        <span class="text-sm">0 Items</span>
        <button id="x-alpha" title="Delete Project">x</button>
      </div>
    </div>
    <div class="bg-white rounded-xl shadow">
      <div class="p-4 flex flex-col">
        <h3 class="font-bold text-lg">Beta</h3>
        <span class="text-sm">1 Items</span>
        <button id="x-beta" title="Delete Project">x</button>
      </div>
    </div>
  </div>
</body></html>
"""

EMPTY_DASHBOARD = """
<html><body>
  <nav><span>RoomCraft</span></nav>
  <div class="bg-white text-center">
    <h3 class="font-bold text-xl">No designs created yet</h3>
  </div>
</body></html>
"""


def resolve(document, locator) -> list:
    matches = document.xpath(locator.steps[0])
    for step in locator.steps[1:]:
        if not matches:
            return []
        matches = matches[0].xpath(step)
    return matches


@pytest.fixture
def dashboard():
    return html.document_fromstring(DASHBOARD)


class TestCardScoping:
    """Locators built from a design name stay inside that design's card."""

    def test_delete_button_belongs_to_named_card(self, dashboard):
        buttons = resolve(dashboard, sc.delete_design_button("Beta"))

        assert [b.get("id") for b in buttons] == ["x-beta"]

    def test_delete_button_for_first_card(self, dashboard):
        buttons = resolve(dashboard, sc.delete_design_button("Alpha"))

        assert [b.get("id") for b in buttons] == ["x-alpha"]

    def test_item_badge_belongs_to_named_card(self, dashboard):
        badges = resolve(dashboard, sc.item_count_badge("Beta"))

        assert [b.text_content().strip() for b in badges] == ["1 Items"]

    def test_item_badge_of_sibling_card_is_not_picked(self, dashboard):
        badges = resolve(dashboard, sc.item_count_badge("Alpha"))

        assert [b.text_content().strip() for b in badges] == ["0 Items"]

    def test_unknown_design_resolves_to_nothing(self, dashboard):
        assert resolve(dashboard, sc.delete_design_button("Gamma")) == []


class TestDashboardListing:
    def test_design_titles_count_cards(self, dashboard):
        titles = resolve(dashboard, sc.DESIGN_TITLES)

        assert [t.text_content() for t in titles] == ["Alpha", "Beta"]
        assert len(resolve(dashboard, sc.LISTING_HEADER)) == 1

    def test_empty_state_heading_is_not_a_design(self):
        document = html.document_fromstring(EMPTY_DASHBOARD)

        assert resolve(document, sc.DESIGN_TITLES) == []
        assert len(resolve(document, sc.EMPTY_STATE)) == 1
        assert resolve(document, sc.LISTING_HEADER) == []
