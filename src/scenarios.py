"""The RoomCraft journey: ordered scenarios and the UI locators they use.

Each scenario runs Setup, Act, Wait, Assert against one shared session and
relies on whatever the scenarios before it left behind.
"""

from failures import GestureNotConfirmed, TimeoutExceeded, expect, expect_equal
from gestures import drag_and_drop
from locators import attr_contains, attr_equals, by_attribute, by_tag, by_text, not_, text_contains
from runner import Scenario


EMPTY_STATE_TEXT = "No designs created yet"

CREATE_ACCOUNT_LINK = by_text("a", "Create Account", exact=True)
REGISTER_HEADING = by_text("h2", "Create Account")
NAME_INPUT = by_attribute("input", "placeholder", "John Doe")
EMAIL_INPUT = by_attribute("input", "type", "email")
PASSWORD_INPUT = by_attribute("input", "type", "password")
GET_STARTED_BUTTON = by_text("button", "Get Started", own=True)
SIGN_IN_BUTTON = by_text("button", "Sign In", own=True)
SIGN_OUT_BUTTON = by_text("button", "Sign Out", own=True)

BRAND = by_text("span", "RoomCraft")
START_PROJECT_LINK = by_text("a", "Start New Project")
PROJECT_NAME_INPUT = by_attribute("input", "placeholder", "e.g. Dream Living Room")
CREATE_WORKSPACE_BUTTON = by_text("button", "Create Workspace")
SAVE_DESIGN_BUTTON = by_text("button", "Save Design")
SAVED_BUTTON = by_text("button", "Saved!")
CANVAS = by_tag("canvas")

DESIGN_TITLES = by_attribute("h3", "class", "font-bold", contains=True).where(not_(text_contains(EMPTY_STATE_TEXT)))
EMPTY_STATE = by_text("h3", EMPTY_STATE_TEXT)
LISTING_HEADER = by_text("h2", "Your Recent Projects")


def welcome_heading(user_name: str):
    return by_text("h1", f"Welcome, {user_name}")


def user_menu_button(user_name: str):
    return by_tag("button").having(by_text("span", user_name))


def design_title(design_name: str):
    return by_text("h3", design_name)


def delete_design_button(design_name: str):
    card = design_title(design_name).ancestor("div", attr_contains("class", "bg-white"))
    return card.descendant(by_attribute("button", "title", "Delete Project"))


def item_count_badge(design_name: str):
    card = design_title(design_name).ancestor("div", attr_contains("class", "flex-col"))
    return card.descendant(by_text("span", "Items"))


def catalog_item(label: str):
    return by_text("p", label, own=True).ancestor("div", attr_equals("draggable", "true"))


async def _any_visible(session, locator) -> bool:
    for el in await session.find_all(locator):
        if await el.is_visible():
            return True
    return False


async def _start_design(ctx, session, key: str, prefix: str) -> str:
    long_ms = session.config.long_timeout_ms
    await session.ensure_at("/")
    start = await session.wait_for_element(START_PROJECT_LINK)
    await start.click()

    name_input = await session.wait_for_element(PROJECT_NAME_INPUT)
    design_name = ctx.remember(key, ctx.unique_name(prefix))
    await name_input.fill(design_name)
    await (await session.find(CREATE_WORKSPACE_BUTTON)).click()

    await session.wait_for_element(SAVE_DESIGN_BUTTON, long_ms)
    if session.verbose:
        print(f"→ Editor open for {design_name!r}")
    return design_name


async def navigate_to_register(ctx, session):
    await session.goto("/login")
    await (await session.find(CREATE_ACCOUNT_LINK)).click()

    await session.wait_for_url("/register")
    heading = await session.wait_for_element(REGISTER_HEADING)

    expect_equal((await heading.inner_text()).strip(), "Create Account", "Register page heading")


async def register_user(ctx, session):
    long_ms = session.config.long_timeout_ms
    await session.goto("/register")

    await (await session.find(NAME_INPUT)).fill(ctx.name)
    await (await session.find(EMAIL_INPUT)).fill(ctx.email)
    await (await session.find(PASSWORD_INPUT)).fill(ctx.password)
    await (await session.find(GET_STARTED_BUTTON)).click()

    await session.wait_for_url("/", long_ms)
    welcome = await session.wait_for_visible(welcome_heading(ctx.name), long_ms)

    expect(await welcome.is_visible(), f"Welcome heading for {ctx.name!r} should be visible after registering")


async def logout(ctx, session):
    await (await session.find(user_menu_button(ctx.name))).click()

    sign_out = await session.wait_for_visible(SIGN_OUT_BUTTON)
    await sign_out.click()

    await session.wait_for_url("/login", session.config.long_timeout_ms)


async def login(ctx, session):
    long_ms = session.config.long_timeout_ms
    await session.ensure_at("/login")

    email = await session.wait_for_element(EMAIL_INPUT, long_ms)
    await email.fill(ctx.email)
    await (await session.find(PASSWORD_INPUT)).fill(ctx.password)
    await (await session.find(SIGN_IN_BUTTON)).click()

    await session.wait_for_url("/", long_ms)
    welcome = await session.wait_for_visible(welcome_heading(ctx.name), long_ms)

    expect(await welcome.is_visible(), f"Welcome heading for {ctx.name!r} should be visible after login")


async def create_and_delete_design(ctx, session):
    long_ms = session.config.long_timeout_ms
    design_name = await _start_design(ctx, session, "empty_design", "Selenium Room")

    # Saved with zero items
    await (await session.find(SAVE_DESIGN_BUTTON)).click()
    await session.wait_for_url("/", long_ms)
    title = await session.wait_for_visible(design_title(design_name), long_ms)
    expect(await title.is_visible(), f"Design {design_name!r} should appear on the dashboard")

    since = session.dialogs.accept_next()
    await (await session.find(delete_design_button(design_name))).click()
    await session.wait_for_dialog(since)

    await session.wait_for_absent(
        design_title(design_name),
        long_ms,
        message=f"Design {design_name!r} was not removed from dashboard",
    )


async def empty_state(ctx, session):
    await session.goto("/")
    await session.wait_for_element(BRAND, session.config.long_timeout_ms)
    # React effects settle after first paint
    await session.pause()

    projects = await session.find_all(DESIGN_TITLES)
    if session.verbose:
        print(f"→ Dashboard lists {len(projects)} design(s)")

    if not projects:
        empty = await session.wait_for_element(EMPTY_STATE)
        expect(await empty.is_visible(), "Empty state should be displayed when there are no designs")
        expect(not await _any_visible(session, LISTING_HEADER), "Listing header shown alongside the empty state")
    else:
        header = await session.find(LISTING_HEADER)
        expect(await header.is_visible(), "Listing header should be displayed when designs exist")
        expect(not await _any_visible(session, EMPTY_STATE), "Empty state shown alongside listed designs")


async def add_furniture(ctx, session):
    config = session.config
    await _start_design(ctx, session, "furnished_design", "Furniture Test")

    item = await session.find(catalog_item(config.catalog_item))
    canvas = await session.find(CANVAS)
    await drag_and_drop(session.page, item, canvas, strategy=config.drag_strategy, verbose=session.verbose)

    await (await session.find(SAVE_DESIGN_BUTTON)).click()
    await session.wait_for_element(SAVED_BUTTON)

    design_name = ctx.recall("furnished_design")
    await session.goto("/")
    await session.wait_for_element(design_title(design_name), config.long_timeout_ms)
    try:
        await session.wait_for_text(item_count_badge(design_name), "1 Items", config.long_timeout_ms)
    except TimeoutExceeded as e:
        raise GestureNotConfirmed(
            f"{config.catalog_item!r} was not added to {design_name!r}: {e.last_error or e} "
            f"(drag strategy {config.drag_strategy!r} was not honoured)"
        ) from e


SCENARIOS = [
    Scenario("should navigate to register page", navigate_to_register),
    Scenario("should register a new user successfully", register_user),
    Scenario("should logout successfully", logout),
    Scenario("should login successfully with valid credentials", login),
    Scenario("should create a new design, save it, and then delete it", create_and_delete_design),
    Scenario("should show empty state when no designs exist", empty_state),
    Scenario("should add furniture to the design", add_furniture),
]


def select_scenarios(slugs: list[str] | None = None) -> list[Scenario]:
    """Subset of SCENARIOS by slug (body function name), kept in journey order."""
    if not slugs:
        return list(SCENARIOS)
    known = {s.slug for s in SCENARIOS}
    unknown = [s for s in slugs if s not in known]
    if unknown:
        raise ValueError(f"Unknown scenario(s): {', '.join(unknown)}. Known: {', '.join(sorted(known))}")
    wanted = set(slugs)
    return [s for s in SCENARIOS if s.slug in wanted]
