"""Script variables and their bindings to node fields.

A Variable is a named OpenScad value. Binding a Variable to a node property
makes the node's generated script reference the variable by name instead of
a literal, e.g.

    r1 = Variable('r1', 3)
    sphere = Sphere().bind('radius', r1)
    str(sphere)  # -> 'sphere(r = r1);\\n'
"""

import logging
import operator
import re
from dataclasses import dataclass
from numbers import Real

from solidscad.modifier import PoscBaseException
from solidscad.spatial import format_number

log = logging.getLogger(__name__)


class UnknownBindableProperty(PoscBaseException):
    """Attempted to bind a property that is not bindable for the node type."""


class InvalidVariableName(PoscBaseException):
    """A variable name is not a valid OpenScad identifier."""


class DuplicateVariableName(PoscBaseException):
    """A variable name was declared more than once in a scope."""


_IDENTIFIER_RE = re.compile(r'^[$]?[A-Za-z_][A-Za-z0-9_]*$')

_OPERATORS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
}


def _operand_text(operand):
    if isinstance(operand, Variable):
        return operand.name
    if isinstance(operand, bool):
        return 'true' if operand else 'false'
    return format_number(operand)


def _operand_value(operand):
    if isinstance(operand, Variable):
        return operand.value
    return operand


class Variable(object):
    """A named value in the generated script.

    Variables render as their name. Arithmetic with numbers or other
    variables creates an expression variable, e.g. (r1 * 2), whose value is
    computed from the operands at the time of the operation.

    Variables are shared symbols, cloning a node tree keeps references to the
    same Variable objects.
    """

    def __init__(self, name, value=None, is_expression=False):
        if not is_expression and not _IDENTIFIER_RE.match(name):
            raise InvalidVariableName('"%s" is not a valid OpenScad identifier' % name)
        self.name = name
        self.value = value
        self.is_expression = is_expression

    def __str__(self):
        return self.name

    def __repr__(self):
        return 'Variable(%r, %r)' % (self.name, self.value)

    def __float__(self):
        return float(self.value)

    def __int__(self):
        return int(self.value)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def _expression(self, op, other, reflected=False):
        if not isinstance(other, (Variable, Real)):
            return NotImplemented
        lhs, rhs = (other, self) if reflected else (self, other)
        lvalue, rvalue = _operand_value(lhs), _operand_value(rhs)
        value = None
        if lvalue is not None and rvalue is not None:
            value = _OPERATORS[op](lvalue, rvalue)
        text = '(%s %s %s)' % (_operand_text(lhs), op, _operand_text(rhs))
        return Variable(text, value, is_expression=True)

    def __add__(self, other):
        return self._expression('+', other)

    def __radd__(self, other):
        return self._expression('+', other, reflected=True)

    def __sub__(self, other):
        return self._expression('-', other)

    def __rsub__(self, other):
        return self._expression('-', other, reflected=True)

    def __mul__(self, other):
        return self._expression('*', other)

    def __rmul__(self, other):
        return self._expression('*', other, reflected=True)

    def __truediv__(self, other):
        return self._expression('/', other)

    def __rtruediv__(self, other):
        return self._expression('/', other, reflected=True)

    def __neg__(self):
        value = None if self.value is None else -self.value
        return Variable('-%s' % self.name, value, is_expression=True)


class VariableScope(object):
    """An ordered set of variables declared at the top of a script.

    Names are unique within a scope.
    """

    def __init__(self, *variables):
        self._variables = dict()
        for variable in variables:
            self.declare(variable)

    def declare(self, variable: Variable) -> Variable:
        """Adds an existing variable to this scope."""
        if variable.is_expression:
            raise InvalidVariableName(
                'Expression "%s" cannot be declared as a variable' % variable.name)
        if variable.name in self._variables:
            raise DuplicateVariableName(
                'Variable "%s" is already declared in this scope' % variable.name)
        self._variables[variable.name] = variable
        log.debug('declared variable %s = %r', variable.name, variable.value)
        return variable

    def add(self, name, value=None) -> Variable:
        """Creates, declares and returns a new variable."""
        return self.declare(Variable(name, value))

    def __getitem__(self, name) -> Variable:
        return self._variables[name]

    def __contains__(self, name):
        return name in self._variables

    def __iter__(self):
        return iter(self._variables.values())

    def __len__(self):
        return len(self._variables)

    def code_dump(self, code_dumper):
        """Writes an assignment line for each variable."""
        for variable in self._variables.values():
            code_dumper.write_line(
                '%s = %s;' % (variable.name, code_dumper.render_value(variable.value))
            )


@dataclass(frozen=True)
class BindableField:
    """Where a bindable property lands in a node's script output.

    Args:
        field_name: The OpenScad name of the field (e.g. 'r' or '$fn').
        attr_name: The node attribute that receives the variable's value.
        component: For vector fields, the index bound. None binds the whole field.
        divisor: The field receives the variable divided by this, e.g. 2 for a
            diameter bound to a radius field.
    """
    field_name: str
    attr_name: str
    component: int | None = None
    divisor: int = 1


@dataclass(frozen=True)
class Binding:
    """A variable bound to a field of a specific node."""
    property_name: str
    field_name: str
    variable: Variable
    component: int | None = None


class Bindings(object):
    """The collection of bindings on a node, at most one per field (or field component)."""

    def __init__(self):
        self._bindings = dict()

    def add(self, binding: Binding):
        """Adds the binding, replacing any binding that covers the same field.

        A whole field binding replaces its component bindings and a component
        binding replaces a whole field binding.
        """
        if binding.component is None:
            stale = [k for k in self._bindings if k[0] == binding.field_name]
        else:
            stale = [(binding.field_name, None), (binding.field_name, binding.component)]
        for key in stale:
            self._bindings.pop(key, None)
        self._bindings[(binding.field_name, binding.component)] = binding

    def get(self, field_name, component=None) -> Binding | None:
        return self._bindings.get((field_name, component))

    def components(self, field_name) -> dict:
        """Returns a {component index: Variable} map for the given vector field."""
        return dict(
            (k[1], b.variable)
            for k, b in self._bindings.items()
            if k[0] == field_name and k[1] is not None
        )

    def clone(self) -> 'Bindings':
        """Returns a new collection holding new Binding objects for the same variables."""
        result = Bindings()
        for binding in self._bindings.values():
            result.add(Binding(
                binding.property_name, binding.field_name, binding.variable, binding.component))
        return result

    def __deepcopy__(self, memo):
        return self.clone()

    def __iter__(self):
        return iter(self._bindings.values())

    def __len__(self):
        return len(self._bindings)
