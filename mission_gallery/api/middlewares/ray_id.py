from typing import Awaitable
from typing import Callable

from fastapi import Request
from fastapi import Response

from mission_gallery.services.ray_id_service import generate_ray_id
from mission_gallery.services.ray_id_service import ray_id_context


RAY_ID_HEADER = "X-Gallery-Ray-ID"


async def ray_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Ray ID middleware that generates a unique ID for each request.

    Sets the ray_id contextvar (picked up by RayIDFilter on every log line),
    stores it on request.state, and echoes it back in the X-Gallery-Ray-ID
    response header.

    Must be registered last so it executes first.
    """
    ray_id = generate_ray_id()
    ray_id_context.set(ray_id)
    request.state.ray_id = ray_id

    response = await call_next(request)

    response.headers[RAY_ID_HEADER] = ray_id

    return response
