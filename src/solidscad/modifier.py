"""
OpenScad modifiers, metadata and the node capability base.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, repr=False)
class OscModifier(object):
    """Defines an OpenScad modifier

    see: https://en.wikibooks.org/wiki/OpenSCAD_User_Manual/Modifier_Characters
    """
    modifier: str = field(compare=True)
    name: str = field(compare=False)

    def __repr__(self):
        return self.name


DISABLE = OscModifier('*', 'DISABLE') # Ignore this subtree
SHOW_ONLY = OscModifier('!', 'SHOW_ONLY') # Ignore the rest of the tree
DEBUG = OscModifier('#', 'DEBUG') # Highlight the object
TRANSPARENT = OscModifier('%', 'TRANSPARENT')  # Background modifier
BASE_MODIFIERS = (DISABLE, SHOW_ONLY, DEBUG, TRANSPARENT)
BASE_MODIFIERS_SET = set(BASE_MODIFIERS)


# Exceptions for dealing with argument checking.
class PoscBaseException(Exception):
    """Base exception functionality"""


class InvalidModifier(PoscBaseException):
    """Attempting to add or remove an unknown modifier."""


class NotParentException(PoscBaseException):
    """Attempting to get children of a non-parent."""


class PoscMetadataBase(object):
    """Provides medatadata properties. The metabase_name is printed in comments
    in the output file."""

    def getMetadataName(self) -> str:
        if not hasattr(self, '_metabase_name'):
            return ''
        return self._metabase_name

    def setMetadataName(self, value: str):
        self._metabase_name = value
        return self


class PoscModifiers(PoscMetadataBase):
    """Functions to add/remove OpenScad modifiers.

    The add_modifier and remove_modifier functions can be chained as they return self.

    e.g.
    Sphere(r=2) - Cube().add_modifier(SHOW_ONLY, DEBUG)

    Will create a 1x1x1 cube with the ! and # OpenScad modifiers. The SHOW_ONLY
    modifier will cause the sphere to not be displayed.
        difference() {
          sphere(r = 2);
          !#cube(size = [1, 1, 1], center = false);
        }
    """

    def check_is_valid_modifier(self, *modifiers):
        if set(modifiers) - BASE_MODIFIERS_SET:
            raise InvalidModifier(
                '"%r" is not a valid modifier. Muse be one of %r' % (modifiers, BASE_MODIFIERS)
            )

    def add_modifier(self, modifier, *args):
        """Adds one of the model modifiers like DISABLE, SHOW_ONLY, DEBUG or TRANSPARENT.
        Args:
          modifer, *args: The modifier/a being added. Checked for validity.
        """
        self.check_is_valid_modifier(modifier, *args)
        if not hasattr(self, '_osc_modifier'):
            self._osc_modifier = set((modifier,))
        self._osc_modifier.update(args + (modifier,))
        return self

    def remove_modifier(self, modifier, *args):
        """Removes a modifiers, one of DISABLE, SHOW_ONLY, DEBUG or TRANSPARENT.
        Args:
          modifer, *args: The modifier/s being removed. Checked for validity.
        """
        self.check_is_valid_modifier(modifier, *args)
        if not hasattr(self, '_osc_modifier'):
            return self
        self._osc_modifier.difference_update(args + (modifier,))
        return self

    def has_modifier(self, modifier):
        """Checks for presence of a modifier, one of DISABLE, SHOW_ONLY, DEBUG or TRANSPARENT.
        Args:
          modifer: The modifier being inspected. Checked for validity.
        """
        self.check_is_valid_modifier(modifier)
        if not hasattr(self, '_osc_modifier'):
            return False
        return modifier in self._osc_modifier

    def get_modifiers(self):
        """Returns the current set of modifiers as an OpenScad equivalent modifier string"""
        if not hasattr(self, '_osc_modifier'):
            return ''
        # Maintains order of modifiers.
        return ''.join(i.modifier for i in BASE_MODIFIERS if i in self._osc_modifier)


class PoscNodeBase(PoscModifiers):
    """The capability set shared by every node in a model tree.

    A node can be serialized (str()), cloned, and asked for its position
    and axis aligned bounds. Leaf classes provide the implementations.
    """

    def children(self) -> list["PoscNodeBase"]:
        # This should be implemented in PoscParentBase. Illegal to call on
        # non-parent types.
        raise NotParentException("children is not implemented")

    def can_have_children(self) -> bool:
        """This is a childless node, always returns False."""
        return False

    def clone(self) -> "PoscNodeBase":
        raise NotImplementedError("clone is not implemented for %s" % self.__class__.__name__)

    def position(self):
        raise NotImplementedError(
            "position is not implemented for %s" % self.__class__.__name__)

    def bounds(self):
        raise NotImplementedError("bounds is not implemented for %s" % self.__class__.__name__)
