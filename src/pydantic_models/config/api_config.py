from pydantic import BaseModel, Field


class EndpointsConfig(BaseModel):
    """
    Relative OmniHR endpoint paths. `{user_id}` is substituted per employee.
    """
    token: str = "/auth/token/"
    employee_list: str = "/employee/list/"
    base_data: str = "/employee/2.0/users/{user_id}/base-data/"
    time_off_types: str = "/employee/1.1/users/{user_id}/time-off-types/"
    time_off_calendar: str = "/employee/1.1/{user_id}/time-off-calendar/"
    job: str = "/employee/2.0/users/{user_id}/job/"
    termination_dashboard: str = "/onboarding/workflow-dashboard/"


class ApiConfig(BaseModel):
    base_url: str = "https://api.omnihr.co/api/v1"
    page_size: int = Field(default=100, ge=1)
    max_pages: int = Field(default=500, ge=1)
    timeout: float = Field(default=30.0, gt=0)
    concurrency: int = Field(default=5, ge=1)
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)


class ApiCredentials(BaseModel):
    """
    Login data for the token endpoint. Only ever built from environment
    variables, never from the YAML file.
    """
    base_url: str
    subdomain: str
    username: str
    password: str
