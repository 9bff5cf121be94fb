"""Drag-and-drop synthesized from low-level input.

Automation drivers do not reliably deliver native HTML5 drag gestures, so a
drag here is best-effort input injection. It returns once the input has been
sent; whether the application accepted the drop must be checked separately.
"""

from failures import ElementNotFound


# Fallback for apps that only react to HTML5 drag events: fire the whole
# event sequence by hand with one shared DataTransfer.
HTML5_DRAG_SCRIPT = """
(source, target) => {
    const centre = (el) => {
        const r = el.getBoundingClientRect();
        return [r.left + r.width / 2, r.top + r.height / 2];
    };
    const data = new DataTransfer();
    const fire = (el, type, [x, y]) => el.dispatchEvent(new DragEvent(type, {
        bubbles: true, cancelable: true, composed: true,
        dataTransfer: data, clientX: x, clientY: y,
    }));
    const from = centre(source);
    const to = centre(target);
    fire(source, 'dragstart', from);
    fire(target, 'dragenter', to);
    fire(target, 'dragover', to);
    fire(target, 'drop', to);
    fire(source, 'dragend', to);
}
"""


async def _centre(element, role: str) -> tuple[float, float]:
    box = await element.bounding_box()
    if not box:
        raise ElementNotFound(role, "element has no bounding box; is it rendered?")
    return box["x"] + box["width"] / 2, box["y"] + box["height"] / 2


async def drag_and_drop(page, source, target, strategy: str = "mouse", steps: int = 12, hold_ms: int = 100, verbose: bool = False) -> None:
    if strategy not in ("mouse", "html5"):
        raise ValueError(f"Unknown drag strategy: {strategy}")

    if verbose:
        print(f"→ Dragging via {strategy} input (best-effort; verify the result separately)")

    await source.scroll_into_view_if_needed()
    if strategy == "html5":
        target_handle = await target.element_handle()
        await source.evaluate(HTML5_DRAG_SCRIPT, target_handle)
        return

    # Scroll and measure before pressing; scrolling with the button held cancels some drags
    await target.scroll_into_view_if_needed()
    sx, sy = await _centre(source, "drag source")
    tx, ty = await _centre(target, "drop target")

    await page.mouse.move(sx, sy)
    await page.mouse.down()
    # A few pixels of travel before the real move so drag-start thresholds trip
    await page.mouse.move(sx + 5, sy + 5)
    await page.mouse.move(tx, ty, steps=steps)
    if hold_ms > 0:
        await page.wait_for_timeout(hold_ms)
    await page.mouse.up()
