from portal.schemas.base import CamelModel


class RegistrationStatusOut(CamelModel):
    registration_open: bool


class RegistrationToggleRequest(CamelModel):
    registration_open: bool


class RegistrationToggleOut(CamelModel):
    message: str
    registration_open: bool
