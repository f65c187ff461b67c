import uvicorn

from shopify_generator.conf.config import get_settings


def main() -> None:
    """Start the long-running server on 0.0.0.0:$PORT."""
    port = get_settings().PORT
    print(f"Shopify Product Generator running at http://localhost:{port}")

    uvicorn.run(
        "shopify_generator.server.main:app",
        host="0.0.0.0",
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
