from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    environment: str
    credentials_configured: bool
    transports: list[str]


class ToolInfo(BaseModel):
    id: str
    description: str
    inputSchema: dict


class ToolListResponse(BaseModel):
    tools: list[ToolInfo]
    count: int
