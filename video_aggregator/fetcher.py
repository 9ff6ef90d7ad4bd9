import asyncio
import logging
from dataclasses import dataclass

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects
from playwright.async_api import Browser, BrowserContext, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import (
    DEFAULT_ACCEPT_LANGUAGE,
    FETCH_CONCURRENCY,
    FETCH_TIMEOUT,
    MAX_REDIRECTS,
    RENDER_TIMEOUT_MS,
    USER_AGENT,
)


# === 🧾 RESULTS ===
@dataclass
class FetchSuccess:
    url: str
    status: int
    html: str

    @property
    def ok(self) -> bool:
        return True


@dataclass
class FetchFailure:
    url: str
    kind: str
    detail: str = ""
    status: int | None = None

    @property
    def ok(self) -> bool:
        return False


FetchResult = FetchSuccess | FetchFailure


# === 🔌 SHARED RESOURCES ===
client_session: ClientSession | None = None
_session_lock = asyncio.Lock()
_fetch_sem: asyncio.Semaphore | None = None
_playwright_obj = None
_playwright_browser: Browser | None = None
_playwright_context: BrowserContext | None = None
_browser_lock = asyncio.Lock()


def default_headers(accept_language: str = DEFAULT_ACCEPT_LANGUAGE) -> dict:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": accept_language,
        "Accept-Encoding": "gzip, deflate",
    }


def _get_semaphore():
    global _fetch_sem
    if _fetch_sem is None:
        _fetch_sem = asyncio.Semaphore(FETCH_CONCURRENCY)
    return _fetch_sem


async def get_client_session():
    global client_session
    async with _session_lock:
        if client_session is None or client_session.closed:
            client_session = ClientSession(timeout=ClientTimeout(total=FETCH_TIMEOUT))
    return client_session


async def init_browser():
    global _playwright_obj, _playwright_browser, _playwright_context

    async with _browser_lock:
        if _playwright_browser and not _playwright_browser.is_connected():
            _playwright_browser = None
            _playwright_context = None

        if _playwright_obj is None:
            _playwright_obj = await async_playwright().start()

        if _playwright_browser is None or _playwright_context is None:
            _playwright_browser = await _playwright_obj.chromium.launch(
                headless=True,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--no-sandbox",
                    "--disable-dev-shm-usage",
                ],
            )
            _playwright_context = await _playwright_browser.new_context(
                user_agent=USER_AGENT,
                viewport={"width": 1280, "height": 720},
                java_script_enabled=True,
            )

    return _playwright_context


async def close_fetcher():
    global client_session, _playwright_obj, _playwright_browser, _playwright_context

    if client_session and not client_session.closed:
        await client_session.close()
    client_session = None

    if _playwright_context:
        await _playwright_context.close()
    if _playwright_browser:
        await _playwright_browser.close()
    if _playwright_obj:
        await _playwright_obj.stop()
    _playwright_context = None
    _playwright_browser = None
    _playwright_obj = None


# === 🌐 FETCH ===
def classify_status(url: str, status: int) -> FetchFailure:
    if status == 404:
        logging.info(f"FETCH 404 - {url}")
        return FetchFailure(url, "not_found", f"HTTP {status}", status)
    logging.warning(f"FETCH HTTP {status} - {url}")
    return FetchFailure(url, "http", f"HTTP {status}", status)


async def fetch_html(
    url: str,
    headers: dict | None = None,
    timeout: float = FETCH_TIMEOUT,
    session: ClientSession | None = None,
) -> FetchResult:
    request_headers = default_headers()
    if headers:
        request_headers.update(headers)

    session = session or await get_client_session()

    async with _get_semaphore():
        try:
            async with session.get(
                url,
                headers=request_headers,
                timeout=ClientTimeout(total=timeout),
                allow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as resp:
                if not 200 <= resp.status < 400:
                    return classify_status(url, resp.status)
                html = await resp.text(errors="replace")
                logging.debug(f"FETCH OK - {url} ({resp.status}, {len(html)} bytes)")
                return FetchSuccess(url, resp.status, html)
        except asyncio.TimeoutError:
            logging.warning(f"FETCH TIMEOUT - {url} after {timeout:.0f}s")
            return FetchFailure(url, "timeout", f"timed out after {timeout:.0f}s")
        except TooManyRedirects as e:
            logging.warning(f"FETCH REDIRECTS - {url}: {e}")
            return FetchFailure(url, "network", "too many redirects")
        except ClientError as e:
            logging.warning(f"FETCH ERROR - {url}: {e.__class__.__name__} - {e}")
            return FetchFailure(url, "network", f"{e.__class__.__name__}: {e}")


async def fetch_rendered_html(
    url: str,
    headers: dict | None = None,
    timeout: float = FETCH_TIMEOUT,
) -> FetchResult:
    timeout_ms = min(int(timeout * 1000), RENDER_TIMEOUT_MS)
    page = None

    async with _get_semaphore():
        try:
            context = await init_browser()
            page = await context.new_page()
            if headers:
                await page.set_extra_http_headers(
                    {k: v for k, v in headers.items() if k.lower() != "user-agent"}
                )
            response = await page.goto(url, timeout=timeout_ms)
            status = response.status if response else 200
            if not 200 <= status < 400:
                return classify_status(url, status)

            try:
                await page.wait_for_load_state("networkidle", timeout=timeout_ms)
            except PlaywrightTimeoutError:
                logging.debug(f"RENDER - networkidle not reached for {url}")

            html = await page.content()
            logging.debug(f"RENDER OK - {url} ({status}, {len(html)} bytes)")
            return FetchSuccess(url, status, html)
        except PlaywrightTimeoutError:
            logging.warning(f"RENDER TIMEOUT - {url}")
            return FetchFailure(url, "timeout", f"timed out after {timeout_ms}ms")
        except PlaywrightError as e:
            logging.warning(f"RENDER ERROR - {url}: {e}")
            return FetchFailure(url, "network", str(e))
        finally:
            if page:
                try:
                    await page.close()
                except PlaywrightError as e:
                    logging.warning(f"Failed to close page: {e}")
