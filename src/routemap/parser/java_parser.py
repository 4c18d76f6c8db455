"""Jakarta/JAX-RS front-end using Tree-sitter."""

import logging
import re
from dataclasses import dataclass, field

import tree_sitter_java as tsjava
from tree_sitter import Language, Node, Parser

from routemap.errors import UnsupportedExpressionError
from routemap.models import (
    AnnotationRecord,
    ClassDecl,
    ConstantDecl,
    ConstantId,
    ConstantRef,
    FileDeclarations,
    HttpVerb,
    Literal,
    MethodDecl,
    PathExpr,
    PathTerm,
    Scope,
    SourceFile,
)
from routemap.models import (
    Language as LangEnum,
)
from routemap.parser.base import BaseParser

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tsjava.language())

TYPE_DECLARATIONS = ("class_declaration", "interface_declaration")
SUPERTYPE_CLAUSES = ("superclass", "super_interfaces", "extends_interfaces")

PATH_ANNOTATION = "Path"
CONSUMES_ANNOTATION = "Consumes"
PRODUCES_ANNOTATION = "Produces"

MEDIA_TYPE_CONSTANTS = {
    "WILDCARD": "*/*",
    "APPLICATION_XML": "application/xml",
    "APPLICATION_ATOM_XML": "application/atom+xml",
    "APPLICATION_XHTML_XML": "application/xhtml+xml",
    "APPLICATION_SVG_XML": "application/svg+xml",
    "APPLICATION_JSON": "application/json",
    "APPLICATION_JSON_PATCH_JSON": "application/json-patch+json",
    "APPLICATION_FORM_URLENCODED": "application/x-www-form-urlencoded",
    "MULTIPART_FORM_DATA": "multipart/form-data",
    "APPLICATION_OCTET_STREAM": "application/octet-stream",
    "TEXT_PLAIN": "text/plain",
    "TEXT_XML": "text/xml",
    "TEXT_HTML": "text/html",
    "SERVER_SENT_EVENTS": "text/event-stream",
}

_ESCAPE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-3][0-7]{0,2}|[4-7][0-7]?|.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "s": " "}


def _unescape(match: re.Match) -> str:
    token = match.group(1)
    if token[0] == "u":
        return chr(int(token.lstrip("u"), 16))
    if token[0] in "01234567":
        return chr(int(token, 8))
    return _ESCAPES.get(token, token)


@dataclass
class _FileContext:
    """Per-file name resolution state."""

    source: bytes
    package: str | None = None
    imports: dict[str, str] = field(default_factory=dict)
    local_types: dict[str, str] = field(default_factory=dict)
    static_owners: tuple[str, ...] = ()
    on_demand: tuple[str, ...] = ()


@dataclass
class _Annotation:
    name: str
    arguments: dict[str, Node] = field(default_factory=dict)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


class JavaParser(BaseParser):
    """Extracts constants and resource classes from Java sources."""

    def __init__(self):
        self._parser = Parser(JAVA_LANGUAGE)

    @property
    def language(self) -> LangEnum:
        return LangEnum.JAVA

    def parse(self, file: SourceFile) -> FileDeclarations:
        """Parse a Java file and extract routing declarations."""
        return self.parse_source(self.read_file_content(file.path), file)

    def parse_source(self, content: str, file: SourceFile) -> FileDeclarations:
        """Parse Java source text on behalf of ``file``."""
        source = content.encode("utf-8")
        tree = self._parser.parse(source)
        root = tree.root_node

        ctx = _FileContext(source=source)
        ctx.package = self._extract_package(root, ctx)
        self._extract_imports(root, ctx)
        for child in root.children:
            if child.type in TYPE_DECLARATIONS:
                name = self._name_of(child, ctx)
                if name:
                    ctx.local_types[name] = self._qualify_local(name, ctx)

        declarations = FileDeclarations(file=file, package=ctx.package)
        for child in root.children:
            if child.type in TYPE_DECLARATIONS:
                self._visit_type(child, ctx, None, declarations)

        logger.debug(
            f"{file.relative_path}: {len(declarations.classes)} resource classes, "
            f"{len(declarations.constants)} constants"
        )
        return declarations

    def _get_node_text(self, node: Node, ctx: _FileContext) -> str:
        """Get the text content of a node."""
        return ctx.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _name_of(self, node: Node, ctx: _FileContext) -> str | None:
        name = node.child_by_field_name("name")
        return self._get_node_text(name, ctx) if name is not None else None

    def _extract_package(self, root: Node, ctx: _FileContext) -> str | None:
        """Extract the package declaration."""
        for child in root.children:
            if child.type == "package_declaration":
                for subchild in child.children:
                    if subchild.type in ("scoped_identifier", "identifier"):
                        return self._get_node_text(subchild, ctx)
        return None

    def _extract_imports(self, root: Node, ctx: _FileContext) -> None:
        """Record single-type imports, wildcard packages and statically imported owners."""
        static_owners: list[str] = []
        on_demand: list[str] = []

        for child in root.children:
            if child.type != "import_declaration":
                continue

            is_static = any(c.type == "static" for c in child.children)
            is_wildcard = any(c.type == "asterisk" for c in child.children)
            target = None
            for subchild in child.children:
                if subchild.type in ("scoped_identifier", "identifier"):
                    target = self._get_node_text(subchild, ctx)
            if not target:
                continue

            if is_static:
                owner = target if is_wildcard else target.rsplit(".", 1)[0]
                if owner not in static_owners:
                    static_owners.append(owner)
            elif is_wildcard:
                if target not in on_demand:
                    on_demand.append(target)
            else:
                ctx.imports[target.rsplit(".", 1)[-1]] = target

        ctx.static_owners = tuple(static_owners)
        ctx.on_demand = tuple(on_demand)

    def _qualify_local(self, name: str, ctx: _FileContext) -> str:
        return f"{ctx.package}.{name}" if ctx.package else name

    def _qualify_type(self, type_name: str, ctx: _FileContext) -> str:
        """Expand a type name through single-type imports and the file's own types.

        Anything else is returned as written; the constant table expands it
        against the current package and wildcard imports once every
        declaration is known.
        """
        head, _, rest = type_name.partition(".")
        suffix = f".{rest}" if rest else ""
        if head in ctx.imports:
            return ctx.imports[head] + suffix
        if head in ctx.local_types:
            return ctx.local_types[head] + suffix
        return type_name

    def _supertypes(self, node: Node, ctx: _FileContext) -> tuple[str, ...]:
        """Direct superclass and interfaces of a type declaration."""
        names = []
        for child in node.children:
            if child.type not in SUPERTYPE_CLAUSES:
                continue
            type_nodes = []
            for sub in child.named_children:
                if sub.type == "type_list":
                    type_nodes.extend(sub.named_children)
                elif "comment" not in sub.type:
                    type_nodes.append(sub)
            for type_node in type_nodes:
                text = "".join(self._get_node_text(type_node, ctx).split())
                text = text.split("<", 1)[0]
                if text:
                    names.append(self._qualify_type(text, ctx))
        return tuple(names)

    def _extract_modifiers(self, node: Node) -> list[str]:
        modifiers = []
        for child in node.children:
            if child.type == "modifiers":
                for modifier in child.children:
                    if modifier.type in ("public", "private", "protected", "static", "final"):
                        modifiers.append(modifier.type)
        return modifiers

    def _extract_annotations(self, node: Node, ctx: _FileContext) -> list[_Annotation]:
        """Extract annotations from a node's modifiers."""
        annotations = []
        for child in node.children:
            if child.type == "modifiers":
                for modifier in child.children:
                    if modifier.type in ("annotation", "marker_annotation"):
                        ann = self._parse_annotation(modifier, ctx)
                        if ann:
                            annotations.append(ann)
        return annotations

    def _parse_annotation(self, node: Node, ctx: _FileContext) -> _Annotation | None:
        """Parse a single annotation; positional and ``value =`` forms are merged."""
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None

        arguments: dict[str, Node] = {}
        arg_list = node.child_by_field_name("arguments")
        if arg_list is not None:
            for child in arg_list.named_children:
                if child.type in ("line_comment", "block_comment"):
                    continue
                if child.type == "element_value_pair":
                    key = child.child_by_field_name("key")
                    value = child.child_by_field_name("value")
                    if key is not None and value is not None:
                        arguments[self._get_node_text(key, ctx)] = value
                else:
                    arguments["value"] = child

        return _Annotation(name=self._get_node_text(name_node, ctx), arguments=arguments)

    def _visit_type(
        self,
        node: Node,
        ctx: _FileContext,
        enclosing: str | None,
        declarations: FileDeclarations,
        outer: tuple[str, ...] = (),
    ) -> None:
        name = self._name_of(node, ctx)
        body = node.child_by_field_name("body")
        if not name or body is None:
            return

        qualified = f"{enclosing}.{name}" if enclosing else self._qualify_local(name, ctx)
        is_interface = node.type == "interface_declaration"
        scope = Scope(
            owner=qualified,
            visible=ctx.static_owners,
            owners=self._supertypes(node, ctx) + outer,
            package=ctx.package,
            on_demand=ctx.on_demand,
        )

        declarations.constants.extend(self._extract_constants(body, ctx, scope, is_interface))

        class_decl = self._build_class(node, body, ctx, scope, declarations)
        if class_decl is not None:
            declarations.classes.append(class_decl)

        for child in body.children:
            if child.type in TYPE_DECLARATIONS:
                self._visit_type(
                    child, ctx, qualified, declarations, outer=(qualified,) + scope.owners
                )

    def _extract_constants(
        self, body: Node, ctx: _FileContext, scope: Scope, is_interface: bool
    ) -> list[ConstantDecl]:
        """Collect ``static final String`` fields (all String fields of interfaces)."""
        constants = []

        for child in body.children:
            if child.type not in ("constant_declaration", "field_declaration"):
                continue
            if child.type == "field_declaration" and not is_interface:
                modifiers = self._extract_modifiers(child)
                if "static" not in modifiers or "final" not in modifiers:
                    continue

            type_node = child.child_by_field_name("type")
            if type_node is None or self._get_node_text(type_node, ctx) not in (
                "String",
                "java.lang.String",
            ):
                continue

            for declarator in child.children:
                if declarator.type != "variable_declarator":
                    continue
                name = declarator.child_by_field_name("name")
                value = declarator.child_by_field_name("value")
                if name is None or value is None:
                    continue
                identity = ConstantId(scope.owner, self._get_node_text(name, ctx))
                try:
                    expr = PathExpr(terms=tuple(self._to_terms(value, ctx)), scope=scope)
                except UnsupportedExpressionError as e:
                    logger.debug(f"Ignoring constant {identity}: {e}")
                    continue
                constants.append(
                    ConstantDecl(
                        identity=identity, expr=expr, line_number=child.start_point[0] + 1
                    )
                )

        return constants

    def _build_class(
        self,
        node: Node,
        body: Node,
        ctx: _FileContext,
        scope: Scope,
        declarations: FileDeclarations,
    ) -> ClassDecl | None:
        """Build a resource class declaration, or None if nothing is routable."""
        qualified = scope.owner

        try:
            record = self._build_record(self._extract_annotations(node, ctx), ctx, scope)
        except UnsupportedExpressionError as e:
            logger.warning(f"Skipping class {qualified}: {e}")
            return None

        methods = []
        for child in body.children:
            if child.type != "method_declaration":
                continue
            method_name = self._name_of(child, ctx)
            if not method_name:
                continue
            try:
                records = self._method_records(child, ctx, scope)
            except UnsupportedExpressionError as e:
                logger.warning(f"Skipping method {qualified}.{method_name}: {e}")
                continue
            if records:
                methods.append(
                    MethodDecl(
                        name=method_name,
                        records=records,
                        line_number=child.start_point[0] + 1,
                    )
                )

        has_verbs = any(r.verb is not None for m in methods for r in m.records)
        if not has_verbs and (record is None or record.path is None):
            return None

        return ClassDecl(
            name=qualified,
            record=record,
            methods=tuple(methods),
            file_path=declarations.file.path,
        )

    def _method_records(
        self, node: Node, ctx: _FileContext, scope: Scope
    ) -> tuple[AnnotationRecord, ...]:
        """One record per verb annotation; a verb-less record for locators."""
        annotations = self._extract_annotations(node, ctx)
        verbs = [
            verb
            for verb in (HttpVerb.from_annotation(ann.name) for ann in annotations)
            if verb is not None
        ]
        shared = self._build_record(annotations, ctx, scope)

        if verbs:
            shared = shared or AnnotationRecord()
            return tuple(
                AnnotationRecord(
                    verb=verb,
                    path=shared.path,
                    consumes=shared.consumes,
                    produces=shared.produces,
                )
                for verb in verbs
            )
        if shared is not None:
            return (shared,)
        return ()

    def _build_record(
        self, annotations: list[_Annotation], ctx: _FileContext, scope: Scope
    ) -> AnnotationRecord | None:
        """Merge @Path, @Consumes and @Produces into one record."""
        path = None
        consumes = None
        produces = None

        for ann in annotations:
            value = ann.arguments.get("value")
            if ann.simple_name == PATH_ANNOTATION and value is not None:
                path = PathExpr(terms=tuple(self._to_terms(value, ctx)), scope=scope)
            elif ann.simple_name == CONSUMES_ANNOTATION:
                consumes = self._media_types(value, ctx) if value is not None else frozenset()
            elif ann.simple_name == PRODUCES_ANNOTATION:
                produces = self._media_types(value, ctx) if value is not None else frozenset()

        if path is None and consumes is None and produces is None:
            return None
        return AnnotationRecord(path=path, consumes=consumes, produces=produces)

    def _to_terms(self, node: Node, ctx: _FileContext) -> list[PathTerm]:
        """Flatten a literal / concatenation / constant expression into terms."""
        if node.type == "string_literal":
            return [Literal(self._string_value(node, ctx))]

        if node.type == "binary_expression":
            operator = node.child_by_field_name("operator")
            if operator is not None and self._get_node_text(operator, ctx) == "+":
                left = node.child_by_field_name("left")
                right = node.child_by_field_name("right")
                return self._to_terms(left, ctx) + self._to_terms(right, ctx)

        if node.type == "parenthesized_expression":
            inner = [c for c in node.named_children if "comment" not in c.type]
            if len(inner) == 1:
                return self._to_terms(inner[0], ctx)

        if node.type == "identifier":
            return [ConstantRef(self._get_node_text(node, ctx))]

        if node.type == "field_access":
            obj = node.child_by_field_name("object")
            fld = node.child_by_field_name("field")
            if obj is not None and fld is not None and obj.type in ("identifier", "field_access"):
                owner = "".join(self._get_node_text(obj, ctx).split())
                return [
                    ConstantRef(
                        self._get_node_text(fld, ctx), qualifier=self._qualify_type(owner, ctx)
                    )
                ]

        if node.type == "scoped_identifier":
            scope = node.child_by_field_name("scope")
            name = node.child_by_field_name("name")
            if scope is not None and name is not None:
                owner = "".join(self._get_node_text(scope, ctx).split())
                return [
                    ConstantRef(
                        self._get_node_text(name, ctx), qualifier=self._qualify_type(owner, ctx)
                    )
                ]

        raise UnsupportedExpressionError(node.type, self._get_node_text(node, ctx))

    def _string_value(self, node: Node, ctx: _FileContext) -> str:
        """Decode a Java string literal."""
        text = self._get_node_text(node, ctx)
        if text.startswith('"""'):
            return text[3:-3].lstrip("\r\n")
        return _ESCAPE.sub(_unescape, text[1:-1])

    def _media_types(self, node: Node, ctx: _FileContext) -> frozenset[str]:
        """Media types from a literal, a MediaType constant or an array of them."""
        if node.type == "element_value_array_initializer":
            types: set[str] = set()
            for child in node.named_children:
                if "comment" not in child.type:
                    types |= self._media_types(child, ctx)
            return frozenset(types)

        if node.type == "string_literal":
            return self._split_media_types(self._string_value(node, ctx))

        if node.type in ("binary_expression", "parenthesized_expression"):
            try:
                terms = self._to_terms(node, ctx)
            except UnsupportedExpressionError:
                terms = []
            if terms and all(
                isinstance(t, Literal) or t.name in MEDIA_TYPE_CONSTANTS for t in terms
            ):
                return self._split_media_types(
                    "".join(
                        t.value if isinstance(t, Literal) else MEDIA_TYPE_CONSTANTS[t.name]
                        for t in terms
                    )
                )

        text = "".join(self._get_node_text(node, ctx).split())
        constant = text.rsplit(".", 1)[-1]
        return frozenset([MEDIA_TYPE_CONSTANTS.get(constant, text)])

    def _split_media_types(self, value: str) -> frozenset[str]:
        return frozenset(part.strip() for part in value.split(",") if part.strip())
