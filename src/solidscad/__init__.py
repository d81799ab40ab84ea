from solidscad.base import (
    FA_ARG,
    FN_ARG,
    FS_ARG,
    VECTOR3_FLOAT,
    VECTOR3_FLOAT_DEFAULT_1,
    VECTOR3OR4_FLOAT,
    Arg,
    DuplicateNamingOfArgs,
    InitializerNotAllowed,
    NameCollissionFieldNameReserved,
    apply_posc_attributes,
    bool_strict,
    list_of,
    one_of,
    int_strict,
    str_strict,
    vector3,
    AttemptingToAddNonPoscBaseNode,
    CodeDumper,
    Color,
    ConversionException,
    Cube,
    Difference,
    FileWriter,
    Hull,
    IndentLevelStackEmpty,
    Intersection,
    InvalidIndentLevel,
    InvalidValueForBool,
    InvalidValueForInt,
    InvalidValueForStr,
    LazyUnion,
    Minkowski,
    Mirror,
    MissingChild,
    OpenScadApiSpecifier,
    PoscBase,
    PoscParentBase,
    PoscTransformBase,
    RequiredParameterNotProvided,
    Resize,
    Rotate,
    Scale,
    Sphere,
    StringWriter,
    TooManyChildren,
    Translate,
    Union,
)
from solidscad.modifier import (
    BASE_MODIFIERS,
    DEBUG,
    DISABLE,
    SHOW_ONLY,
    TRANSPARENT,
    InvalidModifier,
    NotParentException,
    OscModifier,
    PoscBaseException,
    PoscNodeBase,
)
from solidscad.spatial import Bounds, Vector3, format_number
from solidscad.variables import (
    Binding,
    BindableField,
    Bindings,
    DuplicateVariableName,
    InvalidVariableName,
    UnknownBindableProperty,
    Variable,
    VariableScope,
)
