"""Entry point for the site search HTTP service."""

from __future__ import annotations

import html
import json
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, quote, urlparse

from candidates import Candidate, absolute_url, article_candidate, product_candidate
from config_loader import DEFAULT_SITE_URL, load_config
from corpus import CorpusConfigError, CorpusSource, build_corpus
from language_rules import load_language_rules
from normalizer import repair_mojibake, truncate_text
from search_engine import MatchResult, SearchEngine

LOGGER = logging.getLogger("search_service")

DEFAULT_LIMIT = 5
MAX_LIMIT = 10
PAGE_LIMIT = 5
PAGE_TYPES = ("minden", "cikk", "termek")
ARTICLE_CARD_EXCERPT = 110
PRODUCT_CARD_EXCERPT = 96


def parse_limit(raw: str | None) -> int:
    """Clamp a limit parameter to 1..10; anything unparseable or zero means 5."""
    try:
        value = int(float(raw)) if raw else 0
    except (ValueError, OverflowError):
        value = 0
    if value == 0:
        value = DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, value))


def _first_param(params: dict[str, list[str]], name: str) -> str:
    return (params.get(name) or [""])[0]


def hit_payload(result: MatchResult, site_url: str) -> dict[str, Any]:
    candidate = result.candidate
    return {
        "id": candidate.id,
        "type": candidate.type,
        "title": candidate.title,
        "url": absolute_url(site_url, candidate.path),
        "snippet": candidate.snippet,
    }


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def format_price(amount: float) -> str:
    """Format a forint amount with non-breaking thousands separators."""
    return f"{amount:,.0f}".replace(",", "\u00a0") + " Ft"


def _article_card(candidate: Candidate) -> str:
    row = candidate.row
    image = row.get("cover_image_url") or row.get("featured_image_url") or row.get("cover_url")
    text = truncate_text(candidate.excerpt_source, ARTICLE_CARD_EXCERPT)
    image_html = (
        f'<img src="{html.escape(str(image))}" alt="{html.escape(candidate.title or "Cikk")}" loading="lazy">'
        if image
        else '<div class="muted">Nincs kép</div>'
    )
    return (
        f'<article class="card"><a href="{html.escape(candidate.path or "#")}">'
        f"{image_html}<h4>{html.escape(candidate.title)}</h4>"
        f'<p class="muted">{html.escape(text)}</p></a></article>'
    )


def _product_card(candidate: Candidate) -> str:
    row = candidate.row
    image = row.get("featured_image_url") or row.get("image_url")
    text = truncate_text(candidate.excerpt_source, PRODUCT_CARD_EXCERPT)
    price = _as_number(row.get("price"))
    regular = _as_number(row.get("regular_price"))

    if price is None:
        price_html = '<div class="price">Ár: –</div>'
    else:
        price_html = f'<div class="price">{format_price(price)}</div>'
        if regular is not None and regular > price:
            price_html = f'<div class="regular-price"><s>{format_price(regular)}</s></div>' + price_html

    image_html = (
        f'<img src="{html.escape(str(image))}" alt="{html.escape(candidate.title or "Termék")}" loading="lazy">'
        if image
        else '<div class="muted">Nincs kép</div>'
    )
    return (
        f'<article class="card"><a href="{html.escape(candidate.path or "#")}">'
        f"{image_html}<h4>{html.escape(candidate.title)}</h4>"
        f'<p class="muted">{html.escape(text)}</p>{price_html}</a></article>'
    )


def _section(title: str, query: str, results: list[MatchResult], card) -> str:
    if not results:
        body = f'<div class="card"><p class="muted">Nincs találat erre: <strong>{html.escape(query)}</strong></p></div>'
    else:
        body = '<div class="grid">' + "".join(card(r.candidate) for r in results) + "</div>"
    return f"<section><h3>{title}</h3>{body}</section>"


def render_search_page(
    query: str,
    page_type: str,
    articles: list[MatchResult],
    products: list[MatchResult],
    error: str | None = None,
    configured: bool = True,
) -> str:
    """Render the in-page search results as HTML."""
    options = "".join(
        f'<option value="{value}"{" selected" if value == page_type else ""}>{label}</option>'
        for value, label in (("minden", "Minden"), ("cikk", "Cikkek"), ("termek", "Termékek"))
    )
    form = (
        '<form action="/kereses" method="get">'
        f'<input name="q" value="{html.escape(query)}" placeholder="Pl: fejfájás, gyulladás, alvászavar, immunrendszer…">'
        f'<select name="type">{options}</select><button type="submit">Keresés</button></form>'
    )

    if not query:
        body = (
            '<section class="card"><h2>Hogyan működik?</h2><ol class="muted">'
            "<li>Beírsz egy problémát vagy célt.</li>"
            "<li>Mutatom a kapcsolódó termékeket és cikkeket.</li></ol></section>"
        )
    elif not configured:
        body = f'<section class="card"><h2>Keresés nincs bekötve</h2><p class="muted">{html.escape(error or "")}</p></section>'
    elif error:
        body = f'<section class="card"><h2>Hiba a keresés közben</h2><p class="muted">{html.escape(error)}</p></section>'
    else:
        total = len(articles) + len(products)
        body = (
            f'<section class="card"><h2>Találatok: <span class="muted">{total}</span></h2>'
            f"<div>Kifejezés: <strong>{html.escape(query)}</strong></div></section>"
        )
        if page_type in ("minden", "cikk"):
            body += _section("Cikkek", query, articles, _article_card)
            body += f'<a href="/cikkek?q={quote(query)}">Összes cikk megnyitása →</a>'
        if page_type in ("minden", "termek"):
            body += _section("Termékek", query, products, _product_card)

    return (
        '<!doctype html><html lang="hu"><head><meta charset="utf-8"><title>Keresés</title></head>'
        f"<body><main><header><h1>Keresés</h1>{form}</header>{body}</main></body></html>"
    )


class SearchRequestHandler(BaseHTTPRequestHandler):
    """HTTP handler exposing health, AI search and page search endpoints."""

    engine: SearchEngine
    corpus: CorpusSource
    logger: logging.Logger
    site_url: str = DEFAULT_SITE_URL
    max_rows: int = 2000

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        path = parsed.path
        params = parse_qs(parsed.query)

        if path in ("/health", "/api/v1/health"):
            self._send_json(HTTPStatus.OK, {"status": "ok"})
            return

        if path == "/api/ai-search":
            self._handle_ai_search(params)
            return

        if path in ("/kereses", "/kereses/"):
            self._handle_page_search(params)
            return

        self._send_json(
            HTTPStatus.NOT_FOUND,
            {"error": "Not found", "message": "Use GET /api/ai-search?q=<text>"},
        )

    def _handle_ai_search(self, params: dict[str, list[str]]) -> None:
        query = repair_mojibake(_first_param(params, "q").strip())
        limit = parse_limit(_first_param(params, "limit").strip())

        if not query:
            self._send_json(
                HTTPStatus.OK,
                {"ok": True, "query": "", "limit": limit, "results": {"articles": [], "products": []}},
            )
            return

        try:
            articles = [article_candidate(row) for row in self.corpus.fetch_articles(self.max_rows)]
            products = [product_candidate(row) for row in self.corpus.fetch_products(self.max_rows)]
            outcome = self.engine.search(articles, products, query, limit)
        except Exception as exc:
            self.logger.exception("Search failed for query: %s", query)
            self._send_json(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                {"ok": False, "error": str(exc) or "Search failed."},
            )
            return

        merged = outcome.merged(limit)
        self._send_json(
            HTTPStatus.OK,
            {
                "query": outcome.used_query,
                "count": len(merged),
                "results": [hit_payload(item, self.site_url) for item in merged],
            },
        )

    def _handle_page_search(self, params: dict[str, list[str]]) -> None:
        raw_query = _first_param(params, "q")
        query = raw_query.strip()
        page_type = _first_param(params, "type")
        if page_type not in PAGE_TYPES:
            page_type = "minden"

        articles: list[MatchResult] = []
        products: list[MatchResult] = []
        error: str | None = None
        configured = True

        if query:
            try:
                if page_type in ("minden", "termek"):
                    rows = self.corpus.fetch_products(self.max_rows)
                    products = self.engine.rank([product_candidate(r) for r in rows], query, PAGE_LIMIT)
                if page_type in ("minden", "cikk"):
                    rows = self.corpus.fetch_articles(self.max_rows)
                    articles = self.engine.rank([article_candidate(r) for r in rows], query, PAGE_LIMIT)
            except CorpusConfigError as exc:
                configured = False
                error = str(exc)
            except Exception as exc:
                self.logger.exception("Page search failed for query: %s", query)
                error = str(exc) or "Ismeretlen hiba a keresés közben."

        page = render_search_page(query, page_type, articles, products, error, configured)
        self._send_html(HTTPStatus.OK, page)

    def _send_json(self, status: HTTPStatus, payload: dict[str, object]) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        self._send_body(status, body, "application/json; charset=utf-8")

    def _send_html(self, status: HTTPStatus, page: str) -> None:
        self._send_body(status, page.encode("utf-8"), "text/html; charset=utf-8")

    def _send_body(self, status: HTTPStatus, body: bytes, content_type: str) -> None:
        self.send_response(status.value)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        self.logger.info("%s - %s", self.client_address[0], format % args)


def main() -> None:
    """Load configuration and language rules, then start the HTTP server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    base_dir = Path(__file__).resolve().parent
    config = load_config(base_dir / "config.yml")
    rules = load_language_rules(config.rules_file)

    SearchRequestHandler.engine = SearchEngine(rules, fuzzy=config.fuzzy_matching)
    SearchRequestHandler.corpus = build_corpus(config, LOGGER.getChild("corpus"))
    SearchRequestHandler.logger = LOGGER
    SearchRequestHandler.site_url = config.site_url
    SearchRequestHandler.max_rows = config.max_rows

    server_address = (config.host, config.port)
    httpd = ThreadingHTTPServer(server_address, SearchRequestHandler)

    LOGGER.info("Search service started on http://%s:%d (%s backend)", config.host, config.port, config.backend)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        LOGGER.info("Shutdown signal received")
    finally:
        httpd.server_close()
        LOGGER.info("Server stopped")


if __name__ == "__main__":
    main()
