"""Network helper for announcing the LAN address the shared list is served on."""
import socket


def get_local_ip() -> str:
    """Return the address other devices on the same network can reach, or '127.0.0.1'.

    Connecting a UDP socket only asks the OS which interface it would route
    through; nothing is sent.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("10.255.255.255", 1))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip
