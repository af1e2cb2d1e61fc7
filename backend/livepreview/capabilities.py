"""
The fixed capability set injected into every snippet.

Snippets reference these names as bare identifiers (no imports), so the set must be
known in advance and identical for the whole process lifetime. Component behaviour
is declared here and materialized in the host page by the runtime's component
factory.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from livepreview.mock_data import MOCK_DATA


HOOK_NAMES = (
    "useState",
    "useEffect",
    "useMemo",
    "useRef",
    "useCallback",
    "useReducer",
    "useContext",
)

# Non-hook React exports put in snippet scope.
REACT_EXTRAS = ("Fragment",)

# Argument names of the compiled factory, in call order.
FACTORY_PARAMS = ("React", "ShadcnUI", "LucideIcons", "cn", "mockData")


@dataclass(frozen=True)
class ComponentSpec:
    name: str
    tag: str
    class_name: str = ""
    variants: dict = field(default_factory=dict)
    sizes: dict = field(default_factory=dict)
    attrs: dict = field(default_factory=dict)
    omit: tuple = ()
    rename: dict = field(default_factory=dict)
    behavior: str | None = None  # key into the runtime's `behaviors` table

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "tag": self.tag,
            "className": self.class_name,
            "variants": dict(self.variants),
            "sizes": dict(self.sizes),
            "defaultVariant": "default" if self.variants else None,
            "defaultSize": "default" if self.sizes else None,
            "attrs": dict(self.attrs),
            "omit": list(self.omit),
            "rename": dict(self.rename),
            "behavior": self.behavior,
        }


# ---------------------------------------------------------------------------
# UI components (shadcn/ui-shaped, Tailwind classes)
# ---------------------------------------------------------------------------

_FOCUS_RING = "focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-slate-950 focus-visible:ring-offset-2"

COMPONENTS = (
    ComponentSpec("Accordion", "div", "w-full", omit=("type", "collapsible", "defaultValue", "onValueChange")),
    ComponentSpec("AccordionItem", "details", "border-b group", omit=("value",)),
    ComponentSpec(
        "AccordionTrigger", "summary",
        "flex flex-1 cursor-pointer list-none items-center justify-between py-4 font-medium hover:underline",
    ),
    ComponentSpec("AccordionContent", "div", "pb-4 pt-0 text-sm"),
    ComponentSpec(
        "Alert", "div", "relative w-full rounded-lg border p-4",
        variants={
            "default": "bg-white text-slate-950",
            "destructive": "border-red-500/50 text-red-600",
        },
        attrs={"role": "alert"},
    ),
    ComponentSpec("AlertTitle", "h5", "mb-1 font-medium leading-none tracking-tight"),
    ComponentSpec("AlertDescription", "div", "text-sm [&_p]:leading-relaxed"),
    ComponentSpec("Avatar", "span", "relative flex h-10 w-10 shrink-0 overflow-hidden rounded-full"),
    ComponentSpec("AvatarImage", "img", "aspect-square h-full w-full"),
    ComponentSpec("AvatarFallback", "span", "flex h-full w-full items-center justify-center rounded-full bg-slate-100"),
    ComponentSpec(
        "Button", "button",
        "inline-flex items-center justify-center gap-2 whitespace-nowrap rounded-md text-sm font-medium "
        "transition-colors disabled:pointer-events-none disabled:opacity-50 " + _FOCUS_RING,
        variants={
            "default": "bg-slate-900 text-slate-50 hover:bg-slate-900/90",
            "destructive": "bg-red-500 text-slate-50 hover:bg-red-500/90",
            "outline": "border border-slate-200 bg-white hover:bg-slate-100 hover:text-slate-900",
            "secondary": "bg-slate-100 text-slate-900 hover:bg-slate-100/80",
            "ghost": "hover:bg-slate-100 hover:text-slate-900",
            "link": "text-slate-900 underline-offset-4 hover:underline",
        },
        sizes={
            "default": "h-10 px-4 py-2",
            "sm": "h-9 rounded-md px-3",
            "lg": "h-11 rounded-md px-8",
            "icon": "h-10 w-10",
        },
        attrs={"type": "button"},
        omit=("asChild",),
    ),
    ComponentSpec("Card", "div", "rounded-lg border bg-white text-slate-950 shadow-sm"),
    ComponentSpec("CardHeader", "div", "flex flex-col space-y-1.5 p-6"),
    ComponentSpec("CardTitle", "h3", "text-2xl font-semibold leading-none tracking-tight"),
    ComponentSpec("CardDescription", "p", "text-sm text-slate-500"),
    ComponentSpec("CardContent", "div", "p-6 pt-0"),
    ComponentSpec("CardFooter", "div", "flex items-center p-6 pt-0"),
    ComponentSpec(
        "Checkbox", "input",
        "peer h-4 w-4 shrink-0 rounded-sm border border-slate-900 accent-slate-900 " + _FOCUS_RING,
        attrs={"type": "checkbox"},
        behavior="checkbox",
    ),
    ComponentSpec("DropdownMenu", "details", "relative inline-block text-left", omit=("modal",)),
    ComponentSpec("DropdownMenuTrigger", "summary", "cursor-pointer list-none", omit=("asChild",)),
    ComponentSpec(
        "DropdownMenuContent", "div",
        "absolute z-50 mt-2 min-w-[8rem] overflow-hidden rounded-md border bg-white p-1 shadow-md",
        omit=("align", "sideOffset", "forceMount"),
    ),
    ComponentSpec(
        "DropdownMenuItem", "div",
        "relative flex cursor-default select-none items-center rounded-sm px-2 py-1.5 text-sm hover:bg-slate-100",
        attrs={"role": "menuitem"},
        omit=("onSelect", "asChild"),
    ),
    ComponentSpec(
        "Input", "input",
        "flex h-10 w-full rounded-md border border-slate-200 bg-white px-3 py-2 text-sm "
        "placeholder:text-slate-500 disabled:cursor-not-allowed disabled:opacity-50 " + _FOCUS_RING,
    ),
    ComponentSpec(
        "Label", "label",
        "text-sm font-medium leading-none peer-disabled:cursor-not-allowed peer-disabled:opacity-70",
    ),
    ComponentSpec("Select", "details", "relative w-full", behavior="select-root"),
    ComponentSpec(
        "SelectTrigger", "summary",
        "flex h-10 w-full cursor-pointer list-none items-center justify-between rounded-md border "
        "border-slate-200 bg-white px-3 py-2 text-sm",
    ),
    ComponentSpec(
        "SelectValue", "span", "text-slate-500", rename={"placeholder": "data-placeholder"}, behavior="select-value",
    ),
    ComponentSpec(
        "SelectContent", "div",
        "absolute z-50 mt-1 max-h-96 w-full overflow-hidden rounded-md border bg-white p-1 shadow-md",
        omit=("position",),
    ),
    ComponentSpec(
        "SelectItem", "div",
        "relative flex w-full cursor-default select-none items-center rounded-sm py-1.5 pl-8 pr-2 text-sm hover:bg-slate-100",
        attrs={"role": "option"},
        rename={"value": "data-value"},
        behavior="select-item",
    ),
    ComponentSpec("Tabs", "div", "", behavior="tabs-root"),
    ComponentSpec(
        "TabsList", "div",
        "inline-flex h-10 items-center justify-center rounded-md bg-slate-100 p-1 text-slate-500",
        attrs={"role": "tablist"},
    ),
    ComponentSpec(
        "TabsTrigger", "button",
        "inline-flex items-center justify-center whitespace-nowrap rounded-sm px-3 py-1.5 text-sm font-medium "
        "data-[state=active]:bg-white data-[state=active]:text-slate-950 data-[state=active]:shadow-sm",
        attrs={"type": "button", "role": "tab"},
        behavior="tabs-trigger",
    ),
    ComponentSpec("TabsContent", "div", "mt-2", attrs={"role": "tabpanel"}, behavior="tabs-content"),
    ComponentSpec(
        "Textarea", "textarea",
        "flex min-h-[80px] w-full rounded-md border border-slate-200 bg-white px-3 py-2 text-sm "
        "placeholder:text-slate-500 disabled:cursor-not-allowed disabled:opacity-50 " + _FOCUS_RING,
    ),
)


# Icons come from the whole lucide-react namespace loaded in the host page. These are
# the names suggested to the generator and recognised by the snippet linter.
COMMON_ICONS = (
    "AlertCircle", "ArrowLeft", "ArrowRight", "Bell", "Calendar", "Check", "CheckCircle2",
    "ChevronDown", "ChevronLeft", "ChevronRight", "ChevronUp", "Clock", "ExternalLink",
    "Facebook", "Github", "Globe", "Heart", "Home", "Info", "Instagram", "Linkedin",
    "Loader2", "Mail", "MapPin", "Menu", "Minus", "Phone", "Plus", "RefreshCw", "Search",
    "Settings", "ShoppingCart", "Star", "Trash2", "Twitter", "User", "Users", "X",
)


# ---------------------------------------------------------------------------
# CapabilitySet
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CapabilitySet:
    components: tuple
    mock_data: MappingProxyType
    icon_names: tuple = COMMON_ICONS
    hooks: tuple = HOOK_NAMES

    @property
    def names(self) -> tuple:
        """Component names destructured into snippet scope, sorted."""
        return tuple(sorted(spec.name for spec in self.components))

    def to_payload(self) -> dict:
        """JSON document installed into the host page."""
        return {
            "components": [spec.to_payload() for spec in self.components],
            "mockData": _thaw(self.mock_data),
        }


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value):
    if isinstance(value, MappingProxyType):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def build_capabilities(components=COMPONENTS, icon_names=COMMON_ICONS, mock_data=None) -> CapabilitySet:
    names = [spec.name for spec in components]
    duplicates = {n for n in names if names.count(n) > 1}
    if duplicates:
        raise ValueError(f"Duplicate capability names: {sorted(duplicates)}")
    reserved = set(names) & (set(HOOK_NAMES) | set(REACT_EXTRAS) | set(FACTORY_PARAMS))
    if reserved:
        raise ValueError(f"Capability names shadow reserved identifiers: {sorted(reserved)}")
    return CapabilitySet(
        components=tuple(components),
        mock_data=_freeze(MOCK_DATA if mock_data is None else mock_data),
        icon_names=tuple(sorted(icon_names)),
    )


@lru_cache()
def default_capabilities() -> CapabilitySet:
    return build_capabilities()
