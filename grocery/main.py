import uvicorn
from grocery.api.api_run import app
from grocery.utilities.config import APP_HOST, APP_PORT
from grocery.utilities.network import get_local_ip


if __name__ == "__main__":
    local_url = f"http://localhost:{APP_PORT}"
    local_ip = get_local_ip()
    lan_url = f"http://{local_ip}:{APP_PORT}"
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Uvicorn running on {local_url} (Press CTRL+C to quit)")
    # Other devices in the household open the same list from the LAN address
    if local_ip not in ("127.0.0.1", "localhost"):
        print(f"Accessible from other devices at: {lan_url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
