"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Los mismos modelos describen el esquema de las respuestas JSON de Jira y
  validan en el borde (alias camelCase de la API, snake_case en Python).
- Son inmutables (`frozen=True`): se construyen una vez y solo se leen.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, Discriminator, Field, Tag
from pydantic.config import ConfigDict


class _JiraModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class JiraUser(_JiraModel):
    display_name: str = Field(
        ...,
        alias="displayName",
        description="Nombre visible del usuario.",
    )
    account_id: str = Field(
        ...,
        alias="accountId",
        description="Identificador Atlassian del usuario.",
    )


class JiraProject(_JiraModel):
    """Proyecto tal como lo devuelve `GET /project/{key}`."""

    id: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    name: str = Field(..., description="Nombre legible del proyecto.")
    lead: JiraUser
    project_type_key: str = Field(..., alias="projectTypeKey")


class Group(_JiraModel):
    """Grupo de identidades. `display_name` es la clave contra la política."""

    group_id: str = Field(..., alias="groupId")
    display_name: str = Field(..., alias="displayName")


class ProjectRoleSummary(_JiraModel):
    id: int
    name: str
    self_url: str = Field(..., alias="self")


class ActorUser(_JiraModel):
    account_id: str = Field(..., alias="accountId")


class GroupActor(_JiraModel):
    """Actor de rol respaldado por un grupo."""

    id: int
    display_name: str = Field(..., alias="displayName")
    actor_group: Group = Field(..., alias="actorGroup")


class UserActor(_JiraModel):
    """Actor de rol respaldado por un usuario individual."""

    id: int
    display_name: str = Field(..., alias="displayName")
    actor_user: ActorUser = Field(..., alias="actorUser")


def _actor_tag(value: Any) -> str | None:
    # Jira no manda un discriminador explícito: decide la clave presente.
    if isinstance(value, dict):
        if "actorGroup" in value:
            return "group"
        if "actorUser" in value:
            return "user"
        return None
    if isinstance(value, GroupActor):
        return "group"
    if isinstance(value, UserActor):
        return "user"
    return None


RoleActor = Annotated[
    Union[
        Annotated[GroupActor, Tag("group")],
        Annotated[UserActor, Tag("user")],
    ],
    Discriminator(
        _actor_tag,
        custom_error_type="invalid_role_actor",
        custom_error_message="Actor must carry either 'actorGroup' or 'actorUser'",
    ),
]


class ProjectRoleDetails(ProjectRoleSummary):
    """Detalle de un rol: resumen + actores (grupos y usuarios)."""

    actors: list[RoleActor]

    def group_actors(self) -> list[GroupActor]:
        return [actor for actor in self.actors if isinstance(actor, GroupActor)]


class ProjectGroupRole(_JiraModel):
    """Asignación rol -> grupos dentro de un proyecto."""

    role: str = Field(..., description="Nombre del rol (p.ej. 'Team Member').")
    groups: list[Group] = Field(
        default_factory=list,
        description="Grupos vinculados al rol (vacío si solo hay usuarios).",
    )


class Project(_JiraModel):
    """Agregado principal: un proyecto con sus asignaciones grupo/rol."""

    id: str
    key: str
    name: str
    lead: JiraUser
    group_roles: list[ProjectGroupRole] = Field(
        default_factory=list,
        alias="groupRoles",
    )

    @classmethod
    def from_jira(
        cls,
        project: JiraProject,
        group_roles: list[ProjectGroupRole],
    ) -> Project:
        return cls(
            id=project.id,
            key=project.key,
            name=project.name,
            lead=project.lead,
            group_roles=group_roles,
        )


class BoardSummary(_JiraModel):
    id: int
    name: str
    type: str


class BoardPage(_JiraModel):
    """Página de `GET /rest/agile/1.0/board`."""

    start_at: int = Field(..., alias="startAt")
    max_results: int = Field(..., alias="maxResults")
    is_last: bool = Field(..., alias="isLast")
    values: list[BoardSummary]


class FilterReference(_JiraModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str


class BoardConfiguration(_JiraModel):
    id: int
    name: str
    type: str
    filter: FilterReference | None = None


class SharedProject(_JiraModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    key: str | None = None


class SharePermission(_JiraModel):
    """Entrada de compartición de un filtro (proyecto, grupo, global...)."""

    type: str
    project: SharedProject | None = None


class Filter(_JiraModel):
    """Búsqueda guardada (JQL) que alimenta un board."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    jql: str
    share_permissions: list[SharePermission] = Field(
        ...,
        alias="sharePermissions",
        description="Puede venir vacía, pero la clave es obligatoria.",
    )

    def is_shared_with(self, project_id: str) -> bool:
        return any(
            permission.project is not None and permission.project.id == project_id
            for permission in self.share_permissions
        )


class Board(_JiraModel):
    """Board kanban con su filtro resuelto (si lo tiene)."""

    id: int
    name: str
    type: str
    filter: Filter | None = Field(
        default=None,
        description="Filtro resuelto; ausente si la configuración no lo referencia.",
    )
