"""FastAPI dependencies for profiles."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import ProfileService


get_profile_service = from_app_state("profile_service", "Profile")

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
