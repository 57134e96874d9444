"""Document renderer HTTP client for P&L PDFs"""

import httpx
from typing import Any, Dict
from finance_gateway.domain.exceptions import RenderFailure
from finance_gateway.config import settings
from finance_gateway.infrastructure.observability.metrics import document_render_failures_counter

PDF_MEDIA_TYPE = "application/pdf"


class DocumentRenderer:
    """Client for the external document rendering service"""

    def __init__(
        self,
        render_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.render_url = render_url or settings.document_renderer_url
        self.timeout = timeout or settings.render_timeout_seconds
        self.transport = transport

    async def render(self, payload: Dict[str, Any]) -> bytes:
        """
        Render a report payload to PDF in one request.

        Args:
            payload: JSON-safe document payload (report plus owner block)

        Raises:
            RenderFailure: On timeout, HTTP errors, or a non-PDF reply
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    self.render_url,
                    json=payload,
                    headers={"Accept": PDF_MEDIA_TYPE},
                )
                response.raise_for_status()

                content_type = response.headers.get("content-type", "")
                if not content_type.startswith(PDF_MEDIA_TYPE) or not response.content:
                    raise RenderFailure(f"Renderer returned {content_type or 'no content type'}")

                return response.content

            except httpx.TimeoutException as e:
                document_render_failures_counter.inc()
                raise RenderFailure(f"Renderer timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                document_render_failures_counter.inc()
                raise RenderFailure(f"Renderer error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                document_render_failures_counter.inc()
                raise RenderFailure(f"Renderer unreachable: {e.__class__.__name__}") from e
            except RenderFailure:
                document_render_failures_counter.inc()
                raise
