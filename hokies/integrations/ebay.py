"""eBay Browse API client for the seller's listing feed."""
import base64
import logging
import time
import requests

logger = logging.getLogger(__name__)

OAUTH_URL = "https://api.ebay.com/identity/v1/oauth2/token"
SEARCH_URL = "https://api.ebay.com/buy/browse/v1/item_summary/search"
OAUTH_SCOPE = "https://api.ebay.com/oauth/api_scope"

# Tokens live two hours; refresh a little early
TOKEN_TTL_SECONDS = 6600


class EbayError(Exception):
    pass


def normalize_item(raw: dict, seller: str) -> dict:
    price = raw.get("price") or {}
    image = (raw.get("image") or {}).get("imageUrl")
    if not image:
        thumbs = raw.get("thumbnailImages") or []
        image = thumbs[0].get("imageUrl") if thumbs else ""
    return {
        "item_id": raw.get("itemId"),
        "title": raw.get("title"),
        "price": {"value": price.get("value", "0"), "currency": price.get("currency", "USD")},
        "condition": raw.get("condition") or "Not specified",
        "image": image or "",
        "url": raw.get("itemWebUrl"),
        "seller": (raw.get("seller") or {}).get("username") or seller,
        "location": (raw.get("itemLocation") or {}).get("city") or "",
    }


class EbayClient:
    def __init__(self, app_id, cert_id, seller, query="Virginia Tech", limit=200, session=None, timeout=20):
        self.app_id = app_id
        self.cert_id = cert_id
        self.seller = seller
        self.query = query
        self.limit = limit
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token = None
        self._token_expires = 0.0

    @classmethod
    def from_config(cls, config, session=None):
        return cls(
            config.get("EBAY_APP_ID"),
            config.get("EBAY_CERT_ID"),
            config.get("EBAY_SELLER"),
            query=config.get("EBAY_SEARCH_QUERY", "Virginia Tech"),
            limit=int(config.get("EBAY_LIMIT", 200)),
            session=session,
        )

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.cert_id and self.seller)

    def clear_token(self):
        self._token = None
        self._token_expires = 0.0

    def token(self) -> str:
        if self._token and time.monotonic() < self._token_expires:
            return self._token
        creds = base64.b64encode(f"{self.app_id}:{self.cert_id}".encode()).decode()
        try:
            resp = self.session.post(
                OAUTH_URL,
                headers={
                    "Authorization": f"Basic {creds}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data={"grant_type": "client_credentials", "scope": OAUTH_SCOPE},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EbayError(f"eBay OAuth request failed: {e}") from e
        if resp.status_code != 200:
            raise EbayError(f"OAuth token generation failed: {resp.status_code}")
        self._token = resp.json()["access_token"]
        self._token_expires = time.monotonic() + TOKEN_TTL_SECONDS
        logger.info("eBay OAuth token refreshed")
        return self._token

    def fetch_listings(self):
        if not self.configured:
            raise EbayError("eBay is not configured")
        try:
            resp = self.session.get(
                SEARCH_URL,
                params={"q": self.query, "filter": f"seller:{self.seller}", "limit": self.limit},
                headers={
                    "Authorization": f"Bearer {self.token()}",
                    "X-EBAY-C-MARKETPLACE-ID": "EBAY_US",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EbayError(f"eBay search request failed: {e}") from e
        if resp.status_code == 401:
            self.clear_token()
        if resp.status_code != 200:
            raise EbayError(f"eBay API request failed: {resp.status_code}")
        data = resp.json()
        return {
            "total": data.get("total", 0),
            "items": [normalize_item(i, self.seller) for i in data.get("itemSummaries") or []],
        }
