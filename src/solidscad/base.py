"""solidscad is an object model for generating OpenSCAD scripts.

Models are trees of nodes:
* primitives (Cube, Sphere) own their parameters,
* transforms (Translate, Rotate, Scale, Resize, Mirror, Color) wrap exactly one child,
* blocks (Union, Difference, Intersection, Hull, Minkowski) wrap an ordered list of children.

Every node can be serialized to OpenSCAD script (str(node)), cloned, and asked
for its position and approximate axis aligned bounds. Node fields can be bound
to script Variables so the generated script references the variable by name.

See:
    `OpenSCAD <http://www.openscad.org/documentation.html>`

License:

Copyright (C) 2025 Gianni Mariani

This library is free software; you can redistribute it and/or
modify it under the terms of the GNU Lesser General Public
License as published by the Free Software Foundation; either
version 2.1 of the License, or (at your option) any later version.

This library is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
Lesser General Public License for more details.

You should have received a copy of the GNU Lesser General Public
License along with this library; if not, write to the Free Software
Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA
"""

import copy
import logging
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Tuple

import numpy as np
from frozendict import frozendict

from solidscad.modifier import PoscBaseException, PoscNodeBase
from solidscad.spatial import Bounds, Vector3, format_number
from solidscad.variables import (
    Binding,
    BindableField,
    Bindings,
    UnknownBindableProperty,
    Variable,
    VariableScope,
)

log = logging.getLogger(__name__)


class ConversionException(PoscBaseException):
    """Exception for conversion errors."""


class RequiredParameterNotProvided(PoscBaseException):
    """Exception when a required parameter is not provided."""


class InitializerNotAllowed(PoscBaseException):
    """An initializer (def __init__) was defined and is not allowed."""


class InvalidIndentLevel(PoscBaseException):
    """Indentation level was set to an invalid number."""


class IndentLevelStackEmpty(PoscBaseException):
    """Indentation level was set to an invalid number."""


class InvalidValueForBool(PoscBaseException):
    """Conversion failure for bool value."""


class InvalidValueForStr(PoscBaseException):
    """Conversion failure for str value."""


class InvalidValueForInt(PoscBaseException):
    """Conversion failure for int value."""


class DuplicateNamingOfArgs(PoscBaseException):
    """OpenScadApiSpecifier args has names used more than once."""


class NameCollissionFieldNameReserved(PoscBaseException):
    """An attempt to define an arg with the same name as a field."""


class AttemptingToAddNonPoscBaseNode(PoscBaseException):
    """Attempted to add ad invalid object to child nodes."""


class TooManyChildren(PoscBaseException):
    """A transform already has its child."""


class MissingChild(PoscBaseException):
    """A transform was asked for geometry before a child was added."""


class Arg(object):
    """Defines an argument and field for solidscad PoscBase based APIs."""

    def __init__(
        self,
        name,
        typ,
        default_value,
        docstring,
        required=False,
        osc_name=None,
        positional=False,
        omit_default=False,
    ):
        """Args:
        name: The python name of this parameter.
        osc_name: The name used by OpenScad. Defaults to name.
        typ: The converter for the argument.
        default:_value: Default value for argument (this will be converted by typ).
        docstring: The python doc for the arg.
        required: Throws if the value is not provided.
        positional: If True the OpenScad output contains only the value, not name = value.
        omit_default: If True the field is left out of the output when it equals the default.
        """
        self.name = name
        self.osc_name = osc_name or name
        self.typ = typ
        self.default_value = default_value
        self.docstring = docstring
        self.required = required
        self.positional = positional
        self.omit_default = omit_default

    def to_dataclass_field(self):
        kwds = dict()
        if not self.required:
            kwds['default'] = self.default_value
        return field(**kwds)

    def annotation(self):
        return (self.name, self.typ)

    def is_omitted(self, value):
        """Returns True if the value should not be emitted in the script."""
        if value is None:
            return True
        return self.omit_default and value == self.default_value

    def default_value_str(self):
        """Returns the default value as a string otherwise '' if no default provided."""
        if self.default_value is None:
            return ''
        return repr(self.default_value)

    def document(self):
        "Returns formatted documentation for this arg."
        default_str = self.default_value_str()
        default_str = (' Default ' + default_str) if default_str else default_str
        if self.name == self.osc_name:
            return '%s: %s%s' % (self.name, self.docstring, default_str)
        else:
            return '%s (converts to %s): %s %s' % (
                self.name,
                self.osc_name,
                self.docstring,
                default_str,
            )


@dataclass(frozen=True)
class _ConverterWrapper:
    func: object

    def __repr__(self):
        return self.func.__name__

    def __str__(self):
        return self.func.__name__

    def __call__(self, v):
        return self.func(v)

    @property
    def __name__(self):
        return self.func.__name__


def _as_converter(arg=None):
    if isinstance(arg, str):

        def decorator(f):
            f.__name__ = arg
            return _ConverterWrapper(f)

        return decorator
    return _ConverterWrapper(arg)


def list_of(typ, len_min_max=(3, 3), fill_to_min=None):
    """Defines a converter for an iterable to a list of elements of a given type.
    Args:
        typ: The type of list elements.
        len_min_max: A tuple of the (min,max) length, (0, 0) indicates no limits.
        fill_to_min: If the provided list is too short then use this value.
    Returns:
        A function that performs the conversion.
    """
    description = 'list_of(%s, len_min_max=%r, fill_to_min=%r)' % (
        typ.__name__,
        len_min_max,
        fill_to_min,
    )

    @_as_converter(description)
    def list_converter(value):
        """Converts provided value as a list of the given type.
        value: The value to be converted
        """
        converted_value = []
        for v in value:
            if len_min_max[1] and len(converted_value) >= len_min_max[1]:
                raise ConversionException('provided length too large, max is %d' % len_min_max[1])
            converted_value.append(typ(v))
        if len_min_max[0] and len(value) < len_min_max[0]:
            if fill_to_min is None:
                raise ConversionException(
                    'provided length (%d) too small and fill_to_min is None, min is %d'
                    % (len(converted_value), len_min_max[0])
                )
            fill_converted = typ(fill_to_min)
            for _ in range(len_min_max[0] - len(converted_value)):
                converted_value.append(fill_converted)
        return converted_value

    return list_converter


def one_of(typ, *args):
    """Provides a converter that will iterate over the provided converters until it succeeds.
    Args:
      typ: The first converter argument.
      args: A list of supplemental type argument converters.
    """
    largs = [typ] + list(args)
    description = 'one_of(%s)' % ', '.join(t.__name__ for t in largs)

    @_as_converter(description)
    def one_of_converter(value):
        """Converts a value to one of the list provided to one_of().
        Throws:
          ConversionException if the value failed all conversions."""
        for atyp in largs:
            try:
                return atyp(value)
            except (PoscBaseException, TypeError, ValueError):
                continue
        raise ConversionException("The value %r can't convert using %s" % (value, description))

    return one_of_converter


def vector3(fill_to_min=0.0, allow_scalar=False):
    """Defines a converter to a Vector3.
    Args:
        fill_to_min: Value used for missing elements of a short sequence.
        allow_scalar: If True a single number s converts to Vector3(s, s, s).
    """
    lister = list_of(float, len_min_max=(3, 3), fill_to_min=fill_to_min)
    description = 'vector3(fill_to_min=%r, allow_scalar=%r)' % (fill_to_min, allow_scalar)

    @_as_converter(description)
    def vector3_converter(value):
        if isinstance(value, Vector3):
            return value
        if allow_scalar and isinstance(value, Real) and not isinstance(value, bool):
            return Vector3(float(value), float(value), float(value))
        return Vector3(*lister(value))

    return vector3_converter


@_as_converter
def bool_strict(value):
    """Returns the given value if it is a bool.
    Args:
        value: A boolean value.
    Throws:
        InvalidValueForBool if the provided value is not a bool.
    """
    if not isinstance(value, (bool, np.bool_)):
        raise InvalidValueForBool(
            'expected a bool value but got "%r" of type %s' % (value, value.__class__.__name__)
        )
    return bool(value)


@_as_converter
def str_strict(value):
    """Returns the given value if it is a str object otherwise raises
    InvalidValueForStr exception.
    Args:
        value: A string value.
    Throws:
        InvalidValueForStr if the provided value is not a str.
    """
    if not isinstance(value, str):
        raise InvalidValueForStr(
            'expected a string value but got "%r" of type %s' % (value, value.__class__.__name__)
        )
    return value


@_as_converter
def int_strict(value):
    """Returns the given value as an int if it is integral (e.g. 30 or 30.0).
    Args:
        value: An integral value.
    Throws:
        InvalidValueForInt if the provided value is not integral.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise InvalidValueForInt(
            'expected an integer value but got "%r" of type %s' % (value, value.__class__.__name__)
        )
    if not isinstance(value, Integral) and not float(value).is_integer():
        raise InvalidValueForInt('expected an integer value but got %r' % (value,))
    return int(value)


# Some special common Args. These are not consistently documented.
FA_ARG = Arg('_fa', float, None, 'minimum angle (in degrees) of each segment', osc_name='$fa')
FS_ARG = Arg('_fs', float, None, 'minimum length of each segment', osc_name='$fs')
FN_ARG = Arg(
    '_fn', int_strict, None, 'fixed number of segments. Overrides $fa and $fs', osc_name='$fn')


# The base URL for OpenScad documentation,
OPEN_SCAD_BASE_URL = 'http://en.wikibooks.org/wiki/OpenSCAD_User_Manual/'


class OpenScadApiSpecifier(object):
    """Contains the specification of an OpenScad primitive."""

    def __init__(self, openscad_name, args, url_base, alt_url_anchor=None):
        """
        Args:
            openscad_name: The OpenScad primitive name.
            args: A tuple of Arg()s for each value passed in.
            url_base: The base of the document URL for OpenScad documentation.
        """
        self.openscad_name = openscad_name
        self.args = args
        self.url_base = url_base
        self.alt_url_anchor = alt_url_anchor
        self.args_map = dict((arg.name, arg) for arg in args)

        if len(self.args) != len(self.args_map):
            all_names = [arg.name for arg in self.args]
            dupes = list(set([name for name in all_names if all_names.count(name) > 1]))
            raise DuplicateNamingOfArgs('Duplicate parameter names %r' % dupes)

    def generate_class_doc(self):
        """Generates class level documentation."""
        lines = ['\nConverts to an OpenScad "%s" primitive.' % self.openscad_name]
        if self.url_base:
            anchor = self.openscad_name if self.alt_url_anchor is None else self.alt_url_anchor
            url = OPEN_SCAD_BASE_URL + self.url_base + '#' + anchor
            lines.append(
                'See OpenScad `%s docs <%s>` for more information.' % (self.openscad_name, url)
            )

        return '\n'.join(lines)

    def generate_init_doc(self):
        if self.args:
            return 'Args:\n    ' + ('\n    '.join(arg.document() for arg in self.args))
        return 'No arguments allowed.'


class StringWriter(object):
    """A CodeDumper writer that writes to a string. This can API can be implemented for
    file writers or other uses."""

    def __init__(self):
        self._builder = []

    def get(self):
        """Returns the contents. Every line, including the last, ends with a newline."""
        return '\n'.join(self._builder + [''])

    def append(self, line):
        """Called by the code_dump functions to write generated model
        representation. Override this function to implement other output mechanisms."""
        self._builder.append(line)


class FileWriter(object):
    """A CodeDumper writer that writes to a file."""

    def __init__(self, fp):
        self.fp = fp

    def append(self, line):
        """Called by the code_dump functions to write generated model
        representation. Override this function to implement other output mechanisms."""
        self.fp.write(line)
        self.fp.write('\n')


class CodeDumper(object):
    """Helper for pretty printing OpenScad scripts."""

    class IndentLevelState:
        """Indent level state."""

        def __init__(self, level):
            self.level = level

    def __init__(
        self,
        indent_char=' ',
        indent_multiple=2,
        writer=None,
        str_quotes='"',
        block_ends=(' {', '}', ';', '//'),
    ):
        """
        Args:
           indent_char: the character used to indent.
           indent_multiple: the number of indent_char added per indent level.
           writer: A writer, like StringWriter.
           str_quotes: The quote character used for string values.
           block_ends: Block open, block close, statement terminator and comment prefix.
        """
        self.indent_char = indent_char
        self.indent_multiple = indent_multiple
        self.writer = writer or StringWriter()
        self.str_quotes = str_quotes
        self.block_ends = block_ends
        self.current_indent_level = 0
        self.current_indent_string = ''
        self.indent_level_stack = []

    def check_indent_level(self, level):
        """Check the adding of the resulting indent level will be in range.
        Args:
           level: The new requested indent level.
        Throws:
           InvalidIndentLevel level would is out of range
        """
        if level < 0:
            raise InvalidIndentLevel('Requested indent level below zero is not allowed.')

    def push_increase_indent(self, amount=1):
        """Push an indent level change and increase indent level.
        Args:
           amount: the amount to increase the indent level, Amount can be negative. default 1
        """
        current_level_state = CodeDumper.IndentLevelState(self.current_indent_level)
        try:
            self.set_indent_level(current_level_state.level + amount)
        finally:
            self.indent_level_stack.append(current_level_state)

    def set_indent_level(self, level):
        self.check_indent_level(level)
        self.current_indent_level = level
        self.current_indent_string = (
            self.indent_char * self.indent_multiple * self.current_indent_level
        )

    def pop_indent_level(self):
        """Pops the indent level stack and sets the indent level to the popped value."""
        if len(self.indent_level_stack) == 0:
            raise IndentLevelStackEmpty('Empty indent level stack cannot be popped.')
        level_state = self.indent_level_stack.pop()
        self.set_indent_level(level_state.level)

    def add_line(self, line):
        """Adds the given line as a whole line the output.

        Args:
            line: string to be added.
        """
        self.writer.append(line)

    def write_line(self, line):
        """Adds an indented line to the output. This could be used for comments."""
        self.add_line(self.current_indent_string + line)

    def write_function(self, function_name, params_list, mod_prefix='', suffix=';', comment=None):
        """Dumps a function like line.

        Args:
            function_name: name of function.
            params_list: list of parameters (no commas separating them)
            mod_prefix: a string added in front of the function name
            suffix: A string at the end
            comment: A comment line written above the function.
        """
        if comment:
            self.add_line(''.join([self.current_indent_string, comment]))
        strings = [self.current_indent_string, mod_prefix, function_name, '(']
        strings.append(', '.join(params_list))
        strings.append(')')
        strings.append(suffix)
        self.add_line(''.join(strings))

    def render_value(self, value):
        """Returns a string representing the given value."""
        if isinstance(value, Variable):
            return value.name
        if isinstance(value, (bool, np.bool_)):
            return 'true' if value else 'false'
        if isinstance(value, str):
            escaped = value.replace('\\', '\\\\').replace(self.str_quotes, '\\' + self.str_quotes)
            escaped = escaped.replace('\n', '\\n').replace('\t', '\\t')
            return self.str_quotes + escaped + self.str_quotes
        if isinstance(value, Integral):
            return str(int(value))
        if isinstance(value, Real):
            return format_number(value)
        if isinstance(value, (Vector3, list, tuple)):
            return '[' + ', '.join(self.render_value(v) for v in value) + ']'
        return repr(value)

    def render_name_value(self, arg, value):
        if arg.positional:
            return self.render_value(value)
        return '%s = %s' % (arg.osc_name, self.render_value(value))


def _pack_xyz(args):
    """Allows transform(x, y, z) as shorthand for transform([x, y, z])."""
    if len(args) == 3 and all(isinstance(a, (Real, Variable)) for a in args):
        return (list(args),)
    return args


class PoscBase(PoscNodeBase):
    DUMP_CONTAINER = True
    # Maps lower case property names to the field they bind. Empty means nothing is bindable.
    BINDABLE = frozendict()

    def __setattr__(self, name, value):
        # Args are converted on every assignment, not just on construction.
        spec = getattr(self, 'OSC_API_SPEC', None)
        arg = spec.args_map.get(name) if spec is not None else None
        if arg is not None and value is not None:
            value, new_bindings = self._split_assigned_variables(arg, value)
            if value is not None:
                value = arg.typ(value)
            # Bindings are only recorded once the literal converted.
            for binding in new_bindings:
                self.get_bindings().add(binding)
        super().__setattr__(name, value)

    def __post_init__(self):
        self.init_children()
        # Object should be fully constructed now.
        self.check_valid()

    def init_children(self):
        """Initalizes objects that contain parents."""
        # This node has no children.

    def check_valid(self):
        """Checks that the construction of the object is valid."""
        self.check_required_parameters()

    def check_required_parameters(self):
        """Checks that required parameters are set and not None."""
        for arg in self.OSC_API_SPEC.args:
            if arg.required and (getattr(self, arg.name, None) is None):
                raise RequiredParameterNotProvided('"%s" is required and not provided' % arg.name)

    def get_bindings(self) -> Bindings:
        if not hasattr(self, '_bindings'):
            self._bindings = Bindings()
        return self._bindings

    def _find_bindable(self, field_name, component):
        for property_name, bindable in self.BINDABLE.items():
            if (bindable.field_name == field_name
                    and bindable.component == component
                    and bindable.divisor == 1):
                return property_name, bindable
        raise UnknownBindableProperty(
            'Field "%s" of %s cannot be bound to a variable'
            % (field_name, self.OSC_API_SPEC.openscad_name)
        )

    def _split_assigned_variables(self, arg, value):
        """Separates the Variables in an assigned value from its literal value.

        Returns the literal value and the list of Bindings to record. A Variable
        without a value keeps the field's current value (the Arg default while
        constructing).
        """
        current = getattr(self, arg.name, arg.default_value)
        if isinstance(value, Variable):
            property_name, bindable = self._find_bindable(arg.osc_name, None)
            binding = Binding(property_name, bindable.field_name, value, bindable.component)
            literal = current if value.value is None else value.value
            return literal, [binding]
        if isinstance(value, (list, tuple)) and any(isinstance(v, Variable) for v in value):
            literal = []
            bindings = []
            for i, v in enumerate(value):
                if isinstance(v, Variable):
                    property_name, bindable = self._find_bindable(arg.osc_name, i)
                    bindings.append(Binding(property_name, bindable.field_name, v, i))
                    if v.value is not None:
                        v = v.value
                    elif current is not None and i < len(current):
                        v = current[i]
                    else:
                        v = None
                literal.append(v)
            return literal, bindings
        return value, []

    def bind(self, property_name: str, variable: Variable):
        """Binds a variable to a property of this node.

        The variable's current value is copied into the property and the script
        output references the variable by name in place of the literal value.
        Args:
            property_name: The (case insensitive) property name, e.g. 'radius'.
            variable: The Variable to bind.
        Throws:
            UnknownBindableProperty if this node type has no such bindable property.
        """
        key = property_name.lower()
        bindable: BindableField = self.BINDABLE.get(key)
        if bindable is None:
            raise UnknownBindableProperty(
                'No bindable property matching the name %s was found for %s'
                % (property_name, self.OSC_API_SPEC.openscad_name)
            )
        rendered = variable
        if bindable.divisor != 1:
            # e.g. a diameter renders into the radius field as (d / 2).
            rendered = variable / bindable.divisor
        if rendered.value is not None:
            if bindable.component is None:
                setattr(self, bindable.attr_name, rendered.value)
            else:
                current = getattr(self, bindable.attr_name)
                setattr(
                    self,
                    bindable.attr_name,
                    current.with_component(bindable.component, float(rendered.value)),
                )
        self.get_bindings().add(
            Binding(key, bindable.field_name, rendered, bindable.component))
        log.debug(
            'bound %s.%s to variable %s', self.OSC_API_SPEC.openscad_name, key, variable.name)
        return self

    def collect_args(self, code_dumper):
        """Returns a list of arg=value pairs as strings."""
        bindings = self.get_bindings()
        result = []
        for arg in self.OSC_API_SPEC.args:
            binding = bindings.get(arg.osc_name)
            if binding is not None:
                result.append(code_dumper.render_name_value(arg, binding.variable))
                continue
            v = getattr(self, arg.name, None)
            if arg.is_omitted(v):
                continue
            components = bindings.components(arg.osc_name)
            if components:
                v = [components.get(i, c) for i, c in enumerate(v)]
            result.append(code_dumper.render_name_value(arg, v))
        return result

    def has_children(self):
        return False

    def children(self):
        """This is a childless node, always returns empty tuple."""
        return ()

    def code_dump_scad(self, code_dumper: CodeDumper):
        """Dump the OpenScad equivalent of this script into the provided dumper."""
        suffix = code_dumper.block_ends[0] if self.has_children() else code_dumper.block_ends[2]
        function_name = self.OSC_API_SPEC.openscad_name
        params_list = self.collect_args(code_dumper)
        comment = None
        metadataName = self.getMetadataName()
        if metadataName:
            comment = code_dumper.block_ends[3] + ' ' + repr(metadataName)

        code_dumper.write_function(
            function_name, params_list, self.get_modifiers(), suffix, comment
        )
        if self.has_children():
            code_dumper.push_increase_indent()
            for child in self.children():
                child.code_dump(code_dumper)
            code_dumper.pop_indent_level()
            code_dumper.write_line(code_dumper.block_ends[1])

    def code_dump(self, code_dumper: CodeDumper):
        if self.DUMP_CONTAINER:
            self.code_dump_scad(code_dumper)
        else:
            # A LazyUnion, dump the children directly.
            self.code_dump_contained(code_dumper)

    def dump_with_code_dumper(self, code_dumper: CodeDumper, variables: VariableScope = None):
        """Writes the variable assignments (if any) followed by this node."""
        if variables:
            variables.code_dump(code_dumper)
            code_dumper.add_line('')
        self.code_dump(code_dumper)
        return code_dumper

    def __str__(self):
        """Returns the OpenScad equivalent code for this node."""
        return self.dump_with_code_dumper(CodeDumper()).writer.get()

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(self.collect_args(CodeDumper())))

    def dumps(self, variables: VariableScope = None):
        """Returns a string of this object's OpenScad script."""
        return self.dump_with_code_dumper(CodeDumper(), variables).writer.get()

    def dump(self, fp, variables: VariableScope = None):
        """Writes this object's OpenScad script to the given file.
        Args:
            fp: The python file object to use.
            variables: Optional scope of variables declared ahead of the model.
        """
        self.dump_with_code_dumper(CodeDumper(writer=FileWriter(fp)), variables)

    def write(self, filename, variables: VariableScope = None, encoding='utf-8'):
        """Writes the OpenScad script to the given file name.
        Args:
            filename: The filename to create.
        """
        with open(filename, 'w', encoding=encoding) as fp:
            self.dump(fp, variables)
        log.debug('wrote %s script to %s', self.OSC_API_SPEC.openscad_name, filename)

    def clone(self):
        """Returns an independent copy of this subtree. Variables are shared."""
        return copy.deepcopy(self)

    def is_same_as(self, other):
        """True if both nodes generate the same script."""
        return str(self) == str(other)

    # Documentation for the following functions is generated by the decorator
    # apply_posc_transformation_attributes.

    def translate(self, *args, **kwds):
        return Translate(*_pack_xyz(args), **kwds)(self)

    def rotate(self, *args, **kwds):
        return Rotate(*_pack_xyz(args), **kwds)(self)

    def scale(self, *args, **kwds):
        return Scale(*_pack_xyz(args), **kwds)(self)

    def resize(self, *args, **kwds):
        return Resize(*_pack_xyz(args), **kwds)(self)

    def mirror(self, *args, **kwds):
        return Mirror(*_pack_xyz(args), **kwds)(self)

    def color(self, *args, **kwds):
        return Color(*args, **kwds)(self)

    def __add__(self, other):
        """Union of this with other 3D object. See Union."""
        return Union()(self, other)

    def __sub__(self, other):
        """Difference of this with other 3D object. See Difference."""
        return Difference()(self, other)

    def __mul__(self, other):
        """Intersect this with other 3D object. See Intersection."""
        return Intersection()(self, other)

    __and__ = __mul__


# A decorator for PoscBase classes.
def apply_posc_attributes(clazz):
    """Decorator that turns the class into a dataclass with one field per Arg and
    generates its constructor docstring."""
    if clazz.__init__ != PoscBase.__init__:
        raise InitializerNotAllowed('class %s should not define __init__' % clazz.__name__)
    # Check for name collision.
    args: Tuple[Arg] = clazz.OSC_API_SPEC.args
    for arg in args:
        if hasattr(clazz, arg.name):
            raise NameCollissionFieldNameReserved(
                "There exists an attribute '%s' for class %s that collides with an arg."
                % (arg.name, clazz.__name__)
            )
    annotations = dict((arg.annotation() for arg in clazz.OSC_API_SPEC.args))
    clazz.__annotations__ = annotations
    for arg in args:
        setattr(clazz, arg.name, arg.to_dataclass_field())
    dataclass(repr=False, eq=False)(clazz)
    clazz.__init__.__doc__ = clazz.OSC_API_SPEC.generate_init_doc()
    strs = []
    if clazz.__doc__:
        strs.append(clazz.__doc__)
    strs.append(clazz.OSC_API_SPEC.generate_class_doc())
    clazz.__doc__ = '\n'.join(strs)
    return clazz


class PoscParentBase(PoscBase):
    """A PoscBase class that has children. Blocks use this directly.
    This provides basic child handling functions."""

    def init_children(self):
        """Initalizes objects for parents."""
        self._children = []

    def can_have_children(self):
        """Returns true. This node can have children."""
        return True

    def has_children(self):
        """Returns true if the node has children."""
        return bool(self._children)

    def children(self) -> list[PoscBase]:
        """Returns the list of children"""
        return self._children

    def append(self, *children):
        """Appends the children to this node.
        Args:
          *children: children to append.
        """
        return self.extend(children)

    def extend(self, children):
        """Appends the list of children to this node.
        Args:
          children: list of children to append.
        """
        for child in children:
            if child is None or not hasattr(child, 'OSC_API_SPEC'):
                raise AttemptingToAddNonPoscBaseNode(
                    'Cannot append object %r as child node' % child
                )
        self._children.extend(children)
        return self

    # Support Obj(child, ...) constructs like that in OpenScad.
    __call__ = append

    def position(self) -> Vector3:
        """The position of the first child, the origin if there are no children."""
        if not self._children:
            return Vector3()
        return self._children[0].position()

    def bounds(self) -> Bounds:
        """The bounds of the first child, an empty box at the origin if there are no children."""
        if not self._children:
            return Bounds()
        return self._children[0].bounds()


class PoscTransformBase(PoscParentBase):
    """A parent that holds exactly one child and derives its geometry from it."""

    def extend(self, children):
        children = tuple(children)
        if len(self._children) + len(children) > 1:
            raise TooManyChildren(
                '%s takes exactly one child, wrap multiple children in a Union'
                % self.OSC_API_SPEC.openscad_name
            )
        return super().extend(children)

    def child(self) -> PoscBase:
        if not self._children:
            raise MissingChild('%s has no child' % self.OSC_API_SPEC.openscad_name)
        return self._children[0]


# A decorator for transformation classes.
def apply_posc_transformation_attributes(clazz):
    """Does everything that apply_posc_attributes() does but also adds documentation
    to the corresponding PoscBase function of the same name.
    """
    clazz = apply_posc_attributes(clazz)
    transform = getattr(PoscBase, clazz.OSC_API_SPEC.openscad_name)
    transform.__doc__ = clazz.__doc__ + '\n' + clazz.__init__.__doc__
    return clazz


# Often used converters.
VECTOR3_FLOAT = vector3(fill_to_min=0.0)
VECTOR3_FLOAT_DEFAULT_1 = vector3(fill_to_min=1.0, allow_scalar=True)
VECTOR3OR4_FLOAT = list_of(float, len_min_max=(3, 4), fill_to_min=0.0)

# The set of OpenScad doumentation URL tails.
OPEN_SCAD_URL_TAIL_PRIMITIVES = 'Primitive_Solids'
OPEN_SCAD_URL_TAIL_TRANSFORMS = 'Transformations'
OPEN_SCAD_URL_TAIL_CSG = 'CSG_Modelling'


@apply_posc_transformation_attributes
class Translate(PoscTransformBase):
    """Translate child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'translate',
        (Arg('v', VECTOR3_FLOAT, None, '(x,y,z) translation vector.', required=True),),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def position(self) -> Vector3:
        return self.child().position() + self.v

    def bounds(self) -> Bounds:
        return self.child().bounds().translate(self.v)


@apply_posc_transformation_attributes
class Rotate(PoscTransformBase):
    """Rotate child nodes by a vector of angles applied to the x, y and z axis in
    sequence.

    The position and bounds of the child are reported unchanged. The bounds are
    therefore only an approximation of the rotated child.
    """

    OSC_API_SPEC = OpenScadApiSpecifier(
        'rotate',
        (
            Arg(
                'a',
                VECTOR3_FLOAT,
                (0, 0, 0),
                'Vector of angles (degrees) applied to each axis in sequence.',
                positional=True,
            ),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def position(self) -> Vector3:
        return self.child().position()

    def bounds(self) -> Bounds:
        return self.child().bounds()


@apply_posc_attributes
class Sphere(PoscBase):
    """Creates a sphere centered at the origin.
    It defaults to a sphere of radius 1.
    """

    OSC_API_SPEC = OpenScadApiSpecifier(
        'sphere',
        (
            Arg('r', float, 1.0, 'radius of sphere.'),
            FN_ARG,
            FA_ARG,
            FS_ARG,
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )

    BINDABLE = frozendict({
        'radius': BindableField('r', 'r'),
        'diameter': BindableField('r', 'r', divisor=2),
        'resolution': BindableField('$fn', '_fn'),
        'minimumangle': BindableField('$fa', '_fa'),
        'minimumfragmentsize': BindableField('$fs', '_fs'),
    })

    @property
    def diameter(self) -> float:
        return self.r * 2

    @diameter.setter
    def diameter(self, value: float):
        if isinstance(value, Variable):
            self.bind('diameter', value)
        else:
            self.r = value / 2

    def position(self) -> Vector3:
        return Vector3()

    def bounds(self) -> Bounds:
        r = self.r
        return Bounds(Vector3(-r, -r, -r), Vector3(r, r, r))


@apply_posc_attributes
class Cube(PoscBase):
    """Creates a cube with it's bottom corner at the origin, or it's center if
    center is true.

    The dimensions are passed as a single size argument, either a number for
    all three sides or an (x, y, z) sequence, e.g. Cube((10, 20, 30), center=True).
    Separate length, width and height arguments (Cube(10, 20, 30)) are not
    accepted; set them through the length, width and height properties.
    """

    OSC_API_SPEC = OpenScadApiSpecifier(
        'cube',
        (
            Arg(
                'size',
                VECTOR3_FLOAT_DEFAULT_1,
                (1, 1, 1),
                'The x, y and z sizes of the cube or rectangular prism',
            ),
            Arg(
                'center', bool_strict, False, 'If true places the center of the cube at the origin.'
            ),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )

    BINDABLE = frozendict({
        'size': BindableField('size', 'size'),
        'center': BindableField('center', 'center'),
        'length': BindableField('size', 'size', 0),
        'width': BindableField('size', 'size', 1),
        'height': BindableField('size', 'size', 2),
    })

    @property
    def length(self) -> float:
        return self.size.x

    @length.setter
    def length(self, value: float):
        self.size = self.size.with_component(0, value)

    @property
    def width(self) -> float:
        return self.size.y

    @width.setter
    def width(self, value: float):
        self.size = self.size.with_component(1, value)

    @property
    def height(self) -> float:
        return self.size.z

    @height.setter
    def height(self, value: float):
        self.size = self.size.with_component(2, value)

    def position(self) -> Vector3:
        """The center of the cube."""
        if self.center:
            return Vector3()
        return self.size / 2

    def bounds(self) -> Bounds:
        if self.center:
            half = self.size / 2
            return Bounds(-half, half)
        return Bounds(Vector3(), self.size)


@apply_posc_transformation_attributes
class Scale(PoscTransformBase):
    """Scales the child nodes. scale"""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'scale',
        (
            Arg('v', VECTOR3_FLOAT_DEFAULT_1, (1, 1, 1), 'The (x,y,z) scale factors.'),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def position(self) -> Vector3:
        return self.child().position() * self.v

    def bounds(self) -> Bounds:
        b = self.child().bounds()
        # Negative factors swap the corners.
        return Bounds.from_points((b.bottom_left * self.v, b.top_right * self.v))


@apply_posc_transformation_attributes
class Resize(PoscTransformBase):
    """Scales the object so the newsize (x,y,z) parameters given. A zero (0.0) size is ignored
    and that dimension's scale factor is 1."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'resize',
        (
            Arg(
                'newsize',
                VECTOR3_FLOAT,
                None,
                'The new (x,y,z) sizes of the resulting object.',
                required=True,
                positional=True,
            ),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def scale_factors(self) -> Vector3:
        """The per axis factor that takes the child's extent to newsize."""
        extent = self.child().bounds().size
        factors = []
        for new, old in zip(self.newsize, extent):
            if new == 0:
                factors.append(1.0)
            elif old == 0:
                log.warning('resize of a zero extent axis to %r is ignored', new)
                factors.append(1.0)
            else:
                factors.append(new / abs(old))
        return Vector3(*factors)

    def position(self) -> Vector3:
        return self.child().position() * self.scale_factors()

    def bounds(self) -> Bounds:
        b = self.child().bounds()
        factors = self.scale_factors()
        return Bounds.from_points((b.bottom_left * factors, b.top_right * factors))


@apply_posc_transformation_attributes
class Mirror(PoscTransformBase):
    """Mirrors across a plane through the origin defined by the normal v."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'mirror',
        (
            Arg(
                'v',
                VECTOR3_FLOAT,
                None,
                'The normal of the plane to be mirrored.',
                required=True,
                positional=True,
            ),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def reflect(self, point: Vector3) -> Vector3:
        """Reflects the point through the mirror plane."""
        n = self.v.as_array()
        nn = n.dot(n)
        if nn == 0:
            log.warning('mirror with a zero normal leaves the child unchanged')
            return point
        p = point.as_array()
        return Vector3.from_array(p - (2 * p.dot(n) / nn) * n)

    def position(self) -> Vector3:
        return self.reflect(self.child().position())

    def bounds(self) -> Bounds:
        return Bounds.from_points(
            [self.reflect(corner) for corner in self.child().bounds().corners()])


@apply_posc_transformation_attributes
class Color(PoscTransformBase):
    """Apply a color (only supported in OpenScad preview mode). Colors can be a name,
    #RRGGBB and it's variants, or a 3 or 4 vector of values [0.0-1.0] for RGB(A)."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'color',
        (
            Arg(
                'c',
                one_of(str_strict, VECTOR3OR4_FLOAT),
                None,
                'A 3 or 4 color RGB or RGBA vector or a string descriptor of the color.',
                required=True,
                positional=True,
            ),
            Arg(
                'alpha',
                float,
                1.0,
                'The opacity from 0.0 to 1.0.',
                positional=True,
                omit_default=True,
            ),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )

    def position(self) -> Vector3:
        return self.child().position()

    def bounds(self) -> Bounds:
        return self.child().bounds()


@apply_posc_attributes
class Union(PoscParentBase):
    """Unifies a set of 3D objects into a single object by performing a union of all the space
    contained by all the shapes."""

    OSC_API_SPEC = OpenScadApiSpecifier('union', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_posc_attributes
class LazyUnion(PoscParentBase):
    """An implicit union for the top level node. The children are written to the
    script without a wrapping statement."""

    DUMP_CONTAINER = False  # When rendering to OpenScad, don't render the container.
    OSC_API_SPEC = OpenScadApiSpecifier('lazy_union', (), OPEN_SCAD_URL_TAIL_CSG)

    def code_dump_contained(self, code_dumper: CodeDumper):
        for child in self.children():
            child.code_dump(code_dumper)


@apply_posc_attributes
class Difference(PoscParentBase):
    """Creates a 3D object by removing the space of the 3D objects following the first
    object provided from the first object."""

    OSC_API_SPEC = OpenScadApiSpecifier('difference', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_posc_attributes
class Intersection(PoscParentBase):
    """Creates a 3D object by finding the common space contained in all the provided
    3D objects."""

    OSC_API_SPEC = OpenScadApiSpecifier('intersection', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_posc_attributes
class Hull(PoscParentBase):
    """Create a hull of the child solids."""

    OSC_API_SPEC = OpenScadApiSpecifier('hull', (), OPEN_SCAD_URL_TAIL_TRANSFORMS)


@apply_posc_attributes
class Minkowski(PoscParentBase):
    """Create a Minkowski sum of the child solids."""

    OSC_API_SPEC = OpenScadApiSpecifier('minkowski', (), OPEN_SCAD_URL_TAIL_TRANSFORMS)
