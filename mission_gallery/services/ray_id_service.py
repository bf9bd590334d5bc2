import contextvars
import uuid


ray_id_context: contextvars.ContextVar[str] = contextvars.ContextVar("ray_id", default="no-ray-id")


def generate_ray_id() -> str:
    """Generate a 16-character hex ray ID from UUID4.

    Returns:
        A 16-character lowercase hex string (first 64 bits of UUID4).
        Example: "a1b2c3d4e5f67890"
    """
    return uuid.uuid4().hex[:16]

