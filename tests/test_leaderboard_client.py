import asyncio
import json

import httpx

from cyberfish.leaderboard_client import LeaderboardClient, Status


def make_client(handler):
    return LeaderboardClient("http://test", timeout_s=1.0,
                             transport=httpx.MockTransport(handler))


def run(coro_fn, handler):
    async def main():
        client = make_client(handler)
        try:
            return await coro_fn(client), client
        finally:
            await client.close()
    return asyncio.run(main())


def test_check_name_free_and_taken():
    seen = []

    def handler(request):
        seen.append(request.url.params["name"])
        return httpx.Response(200, json={"exists": request.url.params["name"] == "Rex"})

    outcome, _ = run(lambda c: c.check_name("Rex"), handler)
    assert outcome.status is Status.TAKEN
    outcome, _ = run(lambda c: c.check_name("Max Power"), handler)
    assert outcome.ok
    assert seen == ["Rex", "Max Power"]


def test_server_error_is_failed():
    outcome, _ = run(lambda c: c.check_name("Rex"),
                     lambda request: httpx.Response(500, json={"error": "Failed to check name"}))
    assert outcome.status is Status.FAILED
    assert outcome.retryable


def test_connection_error_is_transient():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    outcome, _ = run(lambda c: c.check_name("Rex"), handler)
    assert outcome.status is Status.TRANSIENT


def test_timeout_is_transient():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    outcome, client = run(lambda c: c.submit_score("Rex", 4), handler)
    assert outcome.status is Status.TRANSIENT
    assert client.error == "Failed to save score"


def test_malformed_name_check_response():
    outcome, _ = run(lambda c: c.check_name("Rex"),
                     lambda request: httpx.Response(200, json={"nope": 1}))
    assert outcome.status is Status.FAILED


def test_submit_then_refresh():
    posted = []
    ledger = []

    def handler(request):
        if request.method == "POST":
            body = json.loads(request.content)
            posted.append(body)
            ledger.append({"name": body["name"], "score": body["score"], "date": body["date"]})
            return httpx.Response(201, json={"message": "Score saved successfully"})
        return httpx.Response(200, json=ledger)

    outcome, client = run(lambda c: c.submit_score("Rex", 5), handler)
    assert outcome.ok
    assert posted[0]["name"] == "Rex"
    assert posted[0]["score"] == 5
    assert posted[0]["date"]
    assert [r.name for r in client.scores] == ["Rex"]
    assert client.rank_of("Rex") == 1
    assert client.rank_of("Nobody") is None
    assert not client.loading
    assert client.error == ""


def test_refresh_failure_sets_error():
    outcome, client = run(lambda c: c.refresh(), lambda request: httpx.Response(503))
    assert outcome.status is Status.FAILED
    assert client.error == "Failed to load high scores"
    assert client.scores == []


def test_newer_name_check_supersedes_older():
    async def main():
        gate = asyncio.Event()

        async def handler(request):
            if request.url.params["name"] == "Ann":
                await gate.wait()
            return httpx.Response(200, json={"exists": False})

        client = make_client(handler)
        try:
            first = asyncio.ensure_future(client.check_name("Ann"))
            for _ in range(5):
                await asyncio.sleep(0)
            second = await client.check_name("Anna")
            return await first, second
        finally:
            await client.close()

    first, second = asyncio.run(main())
    assert first.status is Status.SUPERSEDED
    assert second.ok


def test_slow_server_times_out_as_a_whole():
    async def main():
        async def handler(request):
            await asyncio.sleep(1.0)
            return httpx.Response(200, json={"exists": False})

        client = LeaderboardClient("http://test", timeout_s=0.05,
                                   transport=httpx.MockTransport(handler))
        try:
            return await client.check_name("Rex")
        finally:
            await client.close()

    outcome = asyncio.run(main())
    assert outcome.status is Status.TRANSIENT
    assert outcome.detail == "timeout"


def test_concurrent_submissions_both_land():
    async def main():
        gate = asyncio.Event()
        ledger = {}

        async def handler(request):
            if request.method == "POST":
                body = json.loads(request.content)
                if body["score"] == 50:
                    await gate.wait()
                ledger[body["name"]] = max(ledger.get(body["name"], 0), body["score"])
                return httpx.Response(201, json={"message": "Score saved successfully"})
            return httpx.Response(200, json=[])

        client = make_client(handler)
        try:
            slow = asyncio.ensure_future(client.submit_score("Rex", 50))
            for _ in range(5):
                await asyncio.sleep(0)
            fast = await client.submit_score("Rex", 3)
            gate.set()
            return await slow, fast, ledger
        finally:
            await client.close()

    slow, fast, ledger = asyncio.run(main())
    assert slow.ok
    assert fast.ok
    assert ledger == {"Rex": 50}
