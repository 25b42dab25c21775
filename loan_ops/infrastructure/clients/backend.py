"""Dashboard backend HTTP client for applications and the fillial/merchant/agent directories"""

import httpx
from datetime import datetime
from typing import Any, Dict, List, Optional
from loan_ops.domain.models import Agent, Application, DirectoryContext, Fillial, Merchant, Payment, Product
from loan_ops.domain.exceptions import BackendAPIError
from loan_ops.config import settings


def parse_timestamp(value: str) -> datetime:
    # Backend emits JS-style ISO strings ("...T10:00:00.000Z")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_term(value: Any) -> Optional[int]:
    """expired_month arrives as a string ("12"); blank means no term"""
    if value is None or value == "":
        return None
    return int(value)


def parse_application(item: Dict[str, Any]) -> Application:
    return Application(
        id=item["id"],
        raw_status=item.get("status"),
        amount=item.get("amount"),
        payment_amount=item.get("payment_amount"),
        percent=item.get("percent"),
        term_months=parse_term(item.get("expired_month")),
        created_at=parse_timestamp(item["createdAt"]),
        fillial_id=item.get("fillial_id"),
        paid=item.get("paid"),
        payment_method=item.get("payment_method"),
        fullname=item.get("fullname") or "",
        phone=item.get("phone"),
        passport=item.get("passport"),
        products=[
            Product(name=p["name"], price=p["price"], count=p.get("count"))
            for p in item.get("products") or []
        ],
        payments=[
            Payment(
                amount=p["amount"],
                occurred_at=parse_timestamp(p.get("paymentDate") or p["createdAt"]),
                status=p.get("status"),
            )
            for p in item.get("payments") or []
        ],
    )


def parse_fillial(item: Dict[str, Any]) -> Fillial:
    return Fillial(
        id=item["id"],
        name=item.get("name") or "",
        region=item.get("region"),
        merchant_id=item.get("merchant_id"),
    )


def parse_agent(item: Dict[str, Any]) -> Agent:
    fillial_ids = {f["id"] for f in item.get("fillials") or []}
    if item.get("fillial_id") is not None:
        fillial_ids.add(item["fillial_id"])
    return Agent(id=item["id"], name=item.get("fullname") or "", fillial_ids=frozenset(fillial_ids))


class BackendClient:
    """Client for the dashboard REST backend"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        page_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.backend_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.token = token or settings.backend_token
        self.page_size = page_size or settings.backend_page_size
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Cache-Control": "no-cache"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _fetch_all(self, path: str, params: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        """
        Walk a paginated listing ({items, total, page, pageSize}) to the end.

        Raises:
            BackendAPIError: On timeout, HTTP errors, or invalid response
        """
        items: List[Dict[str, Any]] = []
        page = 1
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                while True:
                    response = await client.get(
                        f"{self.base_url}{path}",
                        params={**(params or {}), "page": page, "pageSize": self.page_size},
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                    data = response.json()

                    batch = data["items"]
                    items.extend(batch)
                    if not batch or len(items) >= data.get("total", len(items)):
                        return items
                    page += 1

            except httpx.TimeoutException as e:
                raise BackendAPIError(f"Backend timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise BackendAPIError(f"Backend error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise BackendAPIError(f"Backend unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise BackendAPIError(f"Invalid listing from backend: {e}") from e

    async def get_applications(self) -> List[Application]:
        raw = await self._fetch_all("/app/all")
        try:
            return [parse_application(item) for item in raw]
        except (KeyError, ValueError, TypeError) as e:
            raise BackendAPIError(f"Invalid application data from backend: {e}") from e

    async def get_directory(self) -> DirectoryContext:
        fillials = await self._fetch_all("/fillial/all")
        merchants = await self._fetch_all("/merchant/all")
        agents = await self._fetch_all("/user/all", {"role": "AGENT"})
        try:
            return DirectoryContext.from_lists(
                fillials=[parse_fillial(f) for f in fillials],
                merchants=[Merchant(id=m["id"], name=m.get("name") or "") for m in merchants],
                agents=[parse_agent(a) for a in agents],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise BackendAPIError(f"Invalid directory data from backend: {e}") from e
