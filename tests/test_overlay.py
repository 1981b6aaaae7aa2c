import asyncio

import httpx

from fungus_board.overlay import error_markup, fetch_overlay


def _client(status, text=""):
    def handler(request):
        assert request.headers["Accept"] == "text/html"
        return httpx.Response(status, text=text)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_overlay_returns_markup():
    async def run_test():
        async with _client(200, "<h1>How to play</h1>") as client:
            markup = await fetch_overlay("http://host/static/modal/how_to_play.html", client)
        assert markup == "<h1>How to play</h1>"

    asyncio.run(run_test())


def test_fetch_overlay_reports_errors():
    async def run_test():
        url = "http://host/missing.html"
        async with _client(404) as client:
            markup = await fetch_overlay(url, client)
        assert markup == error_markup(url)
        assert markup == '<p class="error">Error loading http://host/missing.html<p>'

    asyncio.run(run_test())
