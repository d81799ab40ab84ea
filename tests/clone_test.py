import unittest

import solidscad as base
from solidscad import Vector3


def all_node_kinds():
    cube = base.Cube((1, 2, 3), center=True)
    return [
        cube,
        base.Sphere(2, _fn=20),
        base.Cube().translate(1, 2, 3),
        base.Cube().rotate(10, 20, 30),
        base.Cube().scale(2, 2, 2),
        base.Cube().resize(4, 4, 4),
        base.Cube().mirror(1, 0, 0),
        base.Cube().color('red', 0.5),
        base.Union()(base.Cube(), base.Sphere()),
        base.Difference()(base.Cube(), base.Sphere()),
        base.Intersection()(base.Cube(), base.Sphere()),
        base.Hull()(base.Cube(), base.Sphere()),
        base.Minkowski()(base.Cube(), base.Sphere()),
        base.LazyUnion()(base.Cube(), base.Sphere()),
    ]


class CloneTest(unittest.TestCase):

    def testRoundTrip(self):
        for node in all_node_kinds():
            clone = node.clone()
            self.assertIsNot(clone, node)
            self.assertIs(type(clone), type(node))
            self.assertEqual(clone.dumps(), node.dumps())
            self.assertTrue(clone.is_same_as(node))

    def testDefaultCube(self):
        self.assertTrue(base.Cube().clone().is_same_as(base.Cube()))

    def testPrimitiveIndependence(self):
        cube = base.Cube(5)
        clone = cube.clone()
        clone.size = 7
        self.assertEqual(cube.size, Vector3(5, 5, 5))
        self.assertFalse(clone.is_same_as(cube))

    def testChildrenAreCloned(self):
        cube = base.Cube(5)
        moved = cube.translate(1, 0, 0)
        clone = moved.clone()
        self.assertIsNot(clone.child(), cube)
        cube.size = 20
        self.assertIn('size = [5, 5, 5]', str(clone))
        self.assertIn('size = [20, 20, 20]', str(moved))
        self.assertEqual(clone.position(), Vector3(3.5, 2.5, 2.5))

    def testBlockChildrenOrder(self):
        block = base.Union()(base.Sphere(1), base.Sphere(2), base.Sphere(3))
        clone = block.clone()
        self.assertEqual([c.r for c in clone.children()], [1, 2, 3])
        for a, b in zip(block.children(), clone.children()):
            self.assertIsNot(a, b)
        clone.append(base.Cube())
        self.assertEqual(len(block.children()), 3)

    def testModifiersAndMetadataCloned(self):
        cube = base.Cube().add_modifier(base.DEBUG).setMetadataName('part')
        clone = cube.clone()
        self.assertTrue(clone.has_modifier(base.DEBUG))
        self.assertEqual(clone.getMetadataName(), 'part')
        clone.remove_modifier(base.DEBUG)
        self.assertTrue(cube.has_modifier(base.DEBUG))

    def testBindingsCloned(self):
        r1 = base.Variable('r1', 3)
        sphere = base.Sphere().bind('radius', r1)
        clone = sphere.clone()
        self.assertEqual(str(clone), 'sphere(r = r1);\n')
        self.assertIsNot(clone.get_bindings(), sphere.get_bindings())
        original_binding = sphere.get_bindings().get('r')
        cloned_binding = clone.get_bindings().get('r')
        self.assertIsNot(cloned_binding, original_binding)
        self.assertIs(cloned_binding.variable, r1)

        clone.bind('radius', base.Variable('r2', 4))
        self.assertEqual(str(sphere), 'sphere(r = r1);\n')
        self.assertEqual(sphere.r, 3)
        self.assertEqual(str(clone), 'sphere(r = r2);\n')

    def testBindingsInNestedTree(self):
        w = base.Variable('w', 2)
        tree = base.Union()(base.Cube().bind('width', w).translate(1, 0, 0))
        clone = tree.clone()
        self.assertTrue(clone.is_same_as(tree))
        clone.children()[0].child().bind('length', w)
        self.assertIn('size = [1, w, 1]', str(tree))
        self.assertIn('size = [w, w, 1]', str(clone))


class BoundsContainPositionTest(unittest.TestCase):

    def check_contains(self, node):
        self.assertTrue(
            node.bounds().contains(node.position()),
            '%r: %r not in %r' % (node, node.position(), node.bounds()))

    def testAllNodeKinds(self):
        for node in all_node_kinds():
            self.check_contains(node)

    def testEmptyBlock(self):
        self.check_contains(base.Union())

    def testNegativeScale(self):
        self.check_contains(base.Cube((2, 4, 6)).scale(-1, 2, -3))
        self.check_contains(base.Sphere(3).translate(5, 5, 5).scale(-2, -2, -2))

    def testMirror(self):
        self.check_contains(base.Cube((2, 4, 6)).mirror(0, 1, 0))
        self.check_contains(base.Cube((2, 4, 6)).translate(3, 0, 0).mirror(1, 1, 0))
        self.check_contains(base.Cube(3).mirror(0, 0, 0))

    def testChained(self):
        self.check_contains(
            base.Cube((1, 2, 3))
            .translate(10, -4, 2)
            .scale(-1, 1, 2)
            .mirror(0, 0, 1)
            .resize(5, 0, 7)
            .rotate(0, 90, 0)
            .color('red'))
        self.check_contains(
            base.Union()(base.Sphere(2).translate(-3, 0, 0).scale(-1, 1, 1), base.Cube()))


if __name__ == "__main__":
    unittest.main()
