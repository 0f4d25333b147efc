"""Pydantic models for API requests/responses"""
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .elements.models import ElementType, TableInfo

HOST_PATTERN = re.compile(r"^([a-zA-Z0-9.-]+|localhost)$")
DATABASE_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
LENGTH_REQUIRED_TYPES = ("VARCHAR", "CHAR", "DECIMAL")

ResizeDirection = Literal["n", "s", "e", "w", "ne", "nw", "se", "sw"]


class CamelModel(BaseModel):
    """Base for models exchanged with the browser (camelCase on the wire)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Editor requests
class AddElementRequest(CamelModel):
    """Add a widget, optionally inside a container"""
    type: ElementType
    parent_id: Optional[str] = None


class MoveElementRequest(CamelModel):
    x: float
    y: float


class ResizeElementRequest(CamelModel):
    direction: ResizeDirection
    dx: float = 0
    dy: float = 0


class ReparentElementRequest(CamelModel):
    parent_id: Optional[str] = None


class SelectElementRequest(CamelModel):
    id: Optional[str] = None


class DashboardNameRequest(CamelModel):
    dashboard_name: str = ""


# Editor responses
class StatusMessageResponse(CamelModel):
    text: str
    success: bool


class EditorStateResponse(CamelModel):
    """Snapshot of the editor session"""
    dashboard_name: str
    selected_id: Optional[str] = None
    elements: List[Dict[str, Any]]
    tables: List[TableInfo]
    message: Optional[StatusMessageResponse] = None
    pending_fetches: int = 0


# Dashboard storage contract
class DashboardActionRequest(CamelModel):
    """Body of the save/load endpoint"""
    action: Literal["save", "load"]
    dashboard_name: str = ""
    elements: Optional[List[Dict[str, Any]]] = None


class DashboardActionResponse(CamelModel):
    success: bool
    error: Optional[str] = None
    dashboard: Optional[Dict[str, Any]] = None


# Onboarding forms
class ConnectionConfig(CamelModel):
    """Database server credentials entered during onboarding"""
    host: str
    port: str = "3306"
    username: str
    password: str = ""

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Host is required")
        if not HOST_PATTERN.match(value):
            raise ValueError("Invalid host format")
        return value

    @field_validator("port", mode="before")
    @classmethod
    def validate_port(cls, value: Any) -> str:
        value = str(value).strip() if value is not None else ""
        if not value:
            raise ValueError("Port is required")
        if not value.isdigit():
            raise ValueError("Port must be a number")
        if not 0 < int(value) <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Username is required")
        return value


class DatabaseCreateRequest(ConnectionConfig):
    database_name: str

    @field_validator("database_name")
    @classmethod
    def validate_database_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Database name is required")
        if not DATABASE_NAME_PATTERN.match(value):
            raise ValueError("Invalid database name (letters, numbers, underscores only)")
        if len(value) > 64:
            raise ValueError("Database name too long (max 64 characters)")
        return value


class TableField(CamelModel):
    """Column definition in the create-table wizard"""
    name: str
    type: str = "VARCHAR"
    length: Optional[str] = None
    is_primary: bool = False
    is_nullable: bool = True
    is_auto_increment: bool = False
    default_value: Optional[str] = None
    default_type: Literal["as_defined", "null", "current_timestamp", ""] = ""

    @model_validator(mode="after")
    def check_column(self) -> "TableField":
        if not self.name.strip():
            raise ValueError("All fields must have a name")
        if self.type in LENGTH_REQUIRED_TYPES and not self.length:
            raise ValueError(f"Length is required for {self.type} fields")
        if self.is_auto_increment and not self.is_primary:
            raise ValueError("Auto-increment fields must be primary keys")
        if self.is_primary:
            # primary keys are never nullable
            self.is_nullable = False
        return self

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude={"default_value"})
        if self.default_type == "as_defined":
            payload["defaultValue"] = self.default_value
        elif self.default_type == "null":
            payload["defaultValue"] = None
        elif self.default_type == "current_timestamp":
            payload["defaultValue"] = "CURRENT_TIMESTAMP"
        return payload


class CreateTableRequest(CamelModel):
    table_name: str
    fields: List[TableField] = Field(..., min_length=1)

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Table name is required")
        return value

    def to_payload(self) -> Dict[str, Any]:
        return {"tableName": self.table_name, "fields": [f.to_payload() for f in self.fields]}


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    timestamp: str
    dependencies: Dict[str, str]
