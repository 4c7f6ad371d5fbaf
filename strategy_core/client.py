"""
Strategy Service Client

The one outbound call: POST the strategy's rules to the execution service.

Request:  {"strategy_name": str, "rules": [Condition, ...]}
Success:  2xx with {"results": ...}
Failure:  non-2xx, optionally {"detail": str} which is shown to the user as-is

No retries and no cancellation. Requests use aiohttp's default timeout unless a
ClientTimeout is passed in. A failed call changes nothing locally.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from .config import get_service_url
from .exceptions import GENERIC_NETWORK_MESSAGE, NetworkError
from .models import StrategyDefinition

logger = logging.getLogger(__name__)


def build_run_request(strategy: StrategyDefinition) -> Dict[str, Any]:
    """Request body for POST /run_strategy"""
    payload = strategy.to_payload()
    return {
        'strategy_name': payload['name'],
        'rules': payload['conditions'],
    }


def _error_detail(body: Any) -> Optional[str]:
    if isinstance(body, dict) and isinstance(body.get('detail'), str) and body['detail']:
        return body['detail']
    return None


class StrategyServiceClient:
    """Async client for the strategy execution service"""

    def __init__(self, url: Optional[str] = None, timeout: Optional[aiohttp.ClientTimeout] = None):
        self.url = url or get_service_url()
        self.timeout = timeout

    async def run_strategy(self, strategy: StrategyDefinition) -> Any:
        """
        Run a strategy remotely

        Returns:
            The `results` value from the response body

        Raises:
            NetworkError: connection failure, non-2xx status, or unreadable body
        """
        body = build_run_request(strategy)
        logger.info(f"Running strategy '{strategy.name}' ({len(body['rules'])} rules) via {self.url}")

        try:
            session_kwargs = {} if self.timeout is None else {'timeout': self.timeout}
            async with aiohttp.ClientSession(**session_kwargs) as session:
                async with session.post(self.url, json=body) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = None

                    if not 200 <= response.status < 300:
                        detail = _error_detail(data)
                        logger.error(f"Strategy service returned HTTP {response.status}: {detail or 'no detail'}")
                        raise NetworkError(detail or GENERIC_NETWORK_MESSAGE, status=response.status)

                    if not isinstance(data, dict):
                        logger.error(f"Strategy service returned an unreadable body (HTTP {response.status})")
                        raise NetworkError(status=response.status)
        except asyncio.TimeoutError as e:
            logger.error(f"Strategy service timed out: {self.url}")
            raise NetworkError() from e
        except aiohttp.ClientError as e:
            logger.error(f"Error calling strategy service: {str(e)}")
            raise NetworkError() from e

        return data.get('results')


def run_strategy_sync(strategy: StrategyDefinition, url: Optional[str] = None) -> Any:
    """Blocking wrapper for scripts and the CLI"""
    return asyncio.run(StrategyServiceClient(url).run_strategy(strategy))
