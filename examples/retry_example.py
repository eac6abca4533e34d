"""Example demonstrating retries against a flaky endpoint.

Runs offline: the endpoint is simulated with an httpx mock transport.
"""

import asyncio

import httpx

from actionfetch import RequestExecutor, RequestSpec, RetryPolicy, Success


def flaky_endpoint(attempt_counter):
    """Refuses the first 2 connections, then answers."""

    def handler(request):
        attempt_counter[0] += 1
        print(f"  Attempt {attempt_counter[0]}...", end=" ")

        if attempt_counter[0] < 3:
            print("❌ Connection refused (simulated)")
            raise httpx.ConnectError("Connection refused", request=request)

        print("✅ Success!")
        return httpx.Response(200, json={"status": "ok", "data": "API response"})

    return handler


async def main():
    print("🔄 Testing Retry Mechanism\n")

    # Example 1: Succeeds on the 3rd attempt
    print("Example 1: Flaky API that succeeds on 3rd attempt")
    attempt_counter = [0]
    executor = RequestExecutor(transport=httpx.MockTransport(flaky_endpoint(attempt_counter)))
    result = await executor.execute(
        RequestSpec(url="https://api.example.com/status", timeout_ms=2000),
        RetryPolicy(max_retries=4, backoff_base_ms=500),
    )
    if isinstance(result, Success):
        print(f"  Result: HTTP {result.status} {result.body} (backoff {result.backoff_ms}ms)\n")

    # Example 2: Not enough retries
    print("Example 2: Only one retry allowed")
    attempt_counter2 = [0]
    executor2 = RequestExecutor(transport=httpx.MockTransport(flaky_endpoint(attempt_counter2)))
    result2 = await executor2.execute(
        RequestSpec(url="https://api.example.com/status", timeout_ms=2000),
        RetryPolicy(max_retries=1, backoff_base_ms=100),
    )
    print(f"  Result: {result2.outcome.value} after {result2.attempts_made} attempts\n")

    print("✅ All retry examples completed!")


if __name__ == "__main__":
    asyncio.run(main())
