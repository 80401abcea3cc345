"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn


def main() -> None:
    """Run the development server."""
    uvicorn.run(
        "taskflow.main:app",
        host="0.0.0.0",  # noqa: S104
        port=8000,
        reload=True,
        reload_dirs=["taskflow"],
    )


if __name__ == "__main__":
    main()
