"""Manifest schema - one pydantic model per type, selected by the ``type`` field.

Per AGENTS.md: Ruthless simplicity - common fields live in BaseManifest, each
category adds only its own fields. The union is discriminated on ``type`` so
pydantic dispatches straight to the right variant.
"""

from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import BeforeValidator
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter

# Singular category -> plural directory name used in type paths.
CATEGORY_DIRS: dict[str, str] = {
    "context": "context",
    "persona": "personas",
    "skill": "skills",
    "workflow": "workflows",
    "prompt": "prompts",
    "template": "templates",
}

CATEGORIES: tuple[str, ...] = tuple(CATEGORY_DIRS)

NAME_PATTERN = r"^[a-z0-9][a-z0-9-]*$"
VERSION_PATTERN = r"^v?\d+\.\d+(\.\d+)?(-[0-9A-Za-z.-]+)?$"


def reference_pattern(plural: str) -> str:
    """Regex a cross-reference into ``plural`` must match."""
    return rf"^{plural}/[a-z0-9-]+(/[a-z0-9-]+)*$"


ContextRef = Annotated[str, Field(pattern=reference_pattern("context"))]
PersonaRef = Annotated[str, Field(pattern=reference_pattern("personas"))]
SkillRef = Annotated[str, Field(pattern=reference_pattern("skills"))]
WorkflowRef = Annotated[str, Field(pattern=reference_pattern("workflows"))]

Runtime = Literal["node", "go"]


def _scalar_to_str(value: Any) -> Any:
    # Unquoted YAML scalars such as 8443, 1.0 or true arrive as numbers and bools
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return value


ScalarStr = Annotated[str, BeforeValidator(_scalar_to_str)]


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True)


class CLIDependency(_Model):
    """External CLI tool a skill shells out to."""

    name: str
    min_version: ScalarStr | None = None


class InputField(_Model):
    """Input parameter of a skill or workflow."""

    name: str
    type: str
    required: bool = False
    default: Any = None
    description: str = ""


class OutputDeclaration(_Model):
    format: str
    schema_: str | None = Field(default=None, alias="schema")


class RegistryToken(_Model):
    """Secret or environment variable a skill needs at runtime."""

    name: str
    required: bool = False
    default: ScalarStr = ""
    description: str = ""


class RegistryOutput(_Model):
    schema_: str | None = Field(default=None, alias="schema")


class RegistryTemplates(_Model):
    format: str
    description: str = ""


class RegistryBlock(_Model):
    """Declares the userdata layout a skill expects (tokens, config, state)."""

    tokens: list[RegistryToken] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)
    state: list[str] = Field(default_factory=list)
    output: RegistryOutput | None = None
    templates: RegistryTemplates | None = None


class WorkflowStep(_Model):
    id: str
    skill: SkillRef
    inputs: dict[str, Any] = Field(default_factory=dict)


class TemplateVariable(_Model):
    name: str
    description: str = ""
    default: ScalarStr = ""
    required: bool = False


class BaseManifest(_Model):
    """Fields shared by every manifest type."""

    name: str = Field(pattern=NAME_PATTERN)
    version: ScalarStr = Field(pattern=VERSION_PATTERN)
    description: str
    tags: list[str] = Field(default_factory=list)
    author: str = ""
    vendor: str | None = None

    @property
    def category(self) -> str:
        return self.type  # type: ignore[attr-defined]


class ContextManifest(BaseManifest):
    type: Literal["context"]
    format: str
    sources: list[str] = Field(min_length=1)
    tokens: int | None = None


class PersonaManifest(BaseManifest):
    type: Literal["persona"]
    expertise: list[str] = Field(default_factory=list)
    tone: str = ""
    conventions: list[str] = Field(default_factory=list)
    context: list[ContextRef] = Field(default_factory=list)
    template: str = ""


class SkillManifest(BaseManifest):
    type: Literal["skill"]
    runtime: Runtime
    topic: str
    cli_dependencies: list[CLIDependency] = Field(default_factory=list)
    inputs: list[InputField] = Field(default_factory=list)
    outputs: OutputDeclaration | None = None
    registry: RegistryBlock | None = None


class WorkflowManifest(BaseManifest):
    type: Literal["workflow"]
    runtime: Runtime
    steps: list[WorkflowStep] = Field(min_length=1)
    inputs: list[InputField] = Field(default_factory=list)
    outputs: OutputDeclaration | None = None


class PromptManifest(BaseManifest):
    type: Literal["prompt"]
    persona: PersonaRef | None = None
    context: list[ContextRef] = Field(default_factory=list)
    skills: list[SkillRef] = Field(default_factory=list)
    workflows: list[WorkflowRef] = Field(default_factory=list)
    template: str = ""


class TemplateManifest(BaseManifest):
    type: Literal["template"]
    format: str
    variables: list[TemplateVariable] = Field(default_factory=list)


Manifest = Annotated[
    ContextManifest | PersonaManifest | SkillManifest | WorkflowManifest | PromptManifest | TemplateManifest,
    Field(discriminator="type"),
]

# Built once at import; a broken schema fails the import, not individual calls.
MANIFEST_ADAPTER: TypeAdapter[Manifest] = TypeAdapter(Manifest)
