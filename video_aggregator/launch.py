import subprocess
import sys
import time
import webbrowser

import requests

from .config import PORT

# === ⚙️ SETTINGS ===
DEFAULT_RETRIES = 20
DEFAULT_DELAY = 1


# === 🧾 LOGGING ===
def log(status: str, message: str, end="\n"):
    icons = {
        "info": "ℹ️ ",
        "success": "✅",
        "error": "❌",
        "action": "🔧",
        "waiting": "⏳",
        "build": "🚀",
    }
    print(f"\r{icons.get(status, '❔')} {message}", end=end, flush=True)


# === 🖥️ SERVER ===
def start_server(host: str = "127.0.0.1", port: int = PORT) -> subprocess.Popen:
    log("build", f"Starting API server on {host}:{port}")
    return subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "video_aggregator.main:app",
            "--host",
            host,
            "--port",
            str(port),
        ]
    )


# === ⏳ WAITERS ===
def wait_for_service(
    host: str, port: int, retries=DEFAULT_RETRIES, delay=DEFAULT_DELAY
) -> bool:
    url = f"http://{host}:{port}/health"
    log("waiting", f"Waiting for {url}")

    for _ in range(retries):
        try:
            if requests.get(url, timeout=2).status_code < 500:
                log("success", f"{url} is ready.")
                return True
        except requests.RequestException:
            pass
        time.sleep(delay)

    log("error", f"Timeout waiting for {url}")
    return False


# === 🌐 BROWSER ===
def open_browser(url=f"http://localhost:{PORT}"):
    log("action", f"Opening browser at {url}")
    webbrowser.open(url)


# === 🚀 MAIN ===
def main():
    log("info", "=== 🚀 Video Search Aggregator Bootstrap ===")
    process = start_server()
    if not wait_for_service("127.0.0.1", PORT):
        process.terminate()
        sys.exit(1)
    open_browser(f"http://localhost:{PORT}/docs")
    log("success", "🎉 All systems operational!")
    try:
        process.wait()
    except KeyboardInterrupt:
        process.terminate()


if __name__ == "__main__":
    main()
