import pytest
from unittest.mock import AsyncMock, patch
from typing import Sequence

from tool_agent_lib.agent_core import ModelClient, ModelResponse, ToolSpec, Turn


# Mock implementation for testing ModelClient base logic
class MockModel(ModelClient):
    def __init__(self, max_retries: int = 3, base_retry_delay: float = 0.1):
        super().__init__(model_name="mock", max_retries=max_retries, base_retry_delay=base_retry_delay)
        self.complete_impl_mock = AsyncMock()

    async def _complete_impl(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        return await self.complete_impl_mock(turns, tools)


@pytest.mark.asyncio
async def test_initialization():
    """Test initialization of ModelClient."""
    model = MockModel(max_retries=5, base_retry_delay=2.0)
    assert model.max_retries == 5
    assert model.base_retry_delay == 2.0


@pytest.mark.asyncio
async def test_complete_happy_path():
    """Test that complete works correctly on the first attempt."""
    model = MockModel()
    expected = ModelResponse(text="Success")
    model.complete_impl_mock.return_value = expected

    result = await model.complete([Turn.user("hello")], [])
    assert result == expected
    assert model.complete_impl_mock.call_count == 1


@pytest.mark.asyncio
async def test_complete_retry_success():
    """Test that complete retries and eventually succeeds."""
    model = MockModel(max_retries=3, base_retry_delay=0.01)
    expected = ModelResponse(text="Success")

    # Fail twice, then succeed
    model.complete_impl_mock.side_effect = [Exception("Fail 1"), Exception("Fail 2"), expected]

    result = await model.complete([Turn.user("hello")], [])
    assert result == expected
    assert model.complete_impl_mock.call_count == 3


@pytest.mark.asyncio
async def test_complete_failure_capture():
    """Test that complete raises the last exception after max retries."""
    model = MockModel(max_retries=2, base_retry_delay=0.01)
    model.complete_impl_mock.side_effect = Exception("Persistent Failure")

    with pytest.raises(Exception, match="Persistent Failure"):
        await model.complete([Turn.user("hello")], [])

    # Initial attempt + 2 retries
    assert model.complete_impl_mock.call_count == 3


@pytest.mark.asyncio
async def test_no_retry_by_default():
    """Without retries a failure is raised after one attempt."""
    model = MockModel(max_retries=0)
    model.complete_impl_mock.side_effect = ConnectionError("down")

    with pytest.raises(ConnectionError):
        await model.complete([Turn.user("hello")], [])
    assert model.complete_impl_mock.call_count == 1


@pytest.mark.asyncio
async def test_exponential_backoff():
    """Test that the delay doubles between attempts."""
    model = MockModel(max_retries=3, base_retry_delay=1.0)
    model.complete_impl_mock.side_effect = [Exception("a"), Exception("b"), Exception("c"), ModelResponse()]

    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await model.complete([], [])

    assert [call.args[0] for call in mock_sleep.call_args_list] == [1.0, 2.0, 4.0]
