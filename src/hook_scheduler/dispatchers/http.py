import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from hook_scheduler.dispatchers.protocol import Dispatcher
from hook_scheduler.domain.firing import Firing, FiringStatus
from hook_scheduler.domain.job import JobPayload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class HttpDispatcher(Dispatcher):
    """
    Dispatcher that posts the job's payload body to the payload URL using aiohttp.

    Every call is bounded by a total timeout and attempted at most once.
    """

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def dispatch(self, firing: Firing, payload: Optional[JobPayload]) -> Firing:
        """
        Asynchronously post the payload body to the payload URL.

        Args:
            firing (Firing): The firing being dispatched.
            payload (Optional[JobPayload]): The job's payload, if any.
        """
        if payload is None or not payload.is_dispatchable:
            logger.info("Job %s fired with no payload url, nothing to dispatch", firing.job_id)
            firing.set_result({"reason": "no payload url"}, status=FiringStatus.SKIPPED)
            return firing

        firing.set_status(FiringStatus.RUNNING)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(payload.url, json=payload.body) as response:
                    result: Dict[str, Any] = {"status": response.status}
                    if response.status >= 400:
                        result["error"] = f"HTTP {response.status}"
                        firing.set_result(result, status=FiringStatus.FAILED)
                    else:
                        firing.set_result(result, status=FiringStatus.SUCCEEDED)
        except asyncio.TimeoutError:
            firing.set_result({"error": f"Timed out after {self.timeout.total}s"}, status=FiringStatus.FAILED)
        except aiohttp.ClientError as e:
            firing.set_result({"error": f"Request failed: {e}"}, status=FiringStatus.FAILED)
        except Exception as e:
            firing.set_result({"error": f"Unexpected error: {e}"}, status=FiringStatus.FAILED)

        if firing.status == FiringStatus.FAILED:
            logger.warning("Dispatch for job %s to %s failed: %s", firing.job_id, payload.url, firing.result["error"])
        else:
            logger.info("Dispatched job %s to %s (HTTP %s)", firing.job_id, payload.url, firing.result["status"])
        return firing
