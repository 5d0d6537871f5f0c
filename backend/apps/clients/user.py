from typing import Optional

from .dtos import UserResponse
from .http import ServiceClient


class UserServiceClient(ServiceClient):
    service_name = "auth-service"

    def get_user_by_id(self, user_id: int) -> Optional[UserResponse]:
        return UserResponse.from_payload(self.get(f"/users/client/user/{user_id}"))
