import unittest

import solidscad as base
from solidscad.variables import Binding, Bindings


class VariableTest(unittest.TestCase):

    def testName(self):
        v = base.Variable('r1', 3)
        self.assertEqual(str(v), 'r1')
        self.assertEqual(float(v), 3.0)
        self.assertEqual(int(base.Variable('$fn', 30)), 30)

    def testInvalidName(self):
        self.assertRaises(base.InvalidVariableName, base.Variable, '1abc')
        self.assertRaises(base.InvalidVariableName, base.Variable, 'a-b')

    def testExpressions(self):
        w = base.Variable('w', 4)
        h = base.Variable('h', 2)
        self.assertEqual((w * 2).name, '(w * 2)')
        self.assertEqual((w * 2).value, 8)
        self.assertEqual((1 + w).name, '(1 + w)')
        self.assertEqual((w - h).value, 2)
        self.assertEqual((10 / w).name, '(10 / w)')
        self.assertEqual((w / 2.5).name, '(w / 2.5)')
        self.assertEqual((-w).name, '-w')
        self.assertEqual((-w).value, -4)
        self.assertTrue((w + h).is_expression)

    def testExpressionWithoutValue(self):
        x = base.Variable('x')
        self.assertIsNone((x + 1).value)

    def testNotANumber(self):
        with self.assertRaises(TypeError):
            base.Variable('x', 1) + 'a'


class VariableScopeTest(unittest.TestCase):

    def testDeclare(self):
        scope = base.VariableScope()
        a = scope.add('a', 1)
        b = scope.declare(base.Variable('b', 2.5))
        self.assertIs(scope['a'], a)
        self.assertIn('b', scope)
        self.assertEqual(list(scope), [a, b])
        self.assertEqual(len(scope), 2)

    def testDuplicate(self):
        scope = base.VariableScope(base.Variable('a', 1))
        self.assertRaises(base.DuplicateVariableName, scope.add, 'a', 2)

    def testExpressionNotDeclarable(self):
        scope = base.VariableScope()
        self.assertRaises(base.InvalidVariableName, scope.declare, base.Variable('a', 1) * 2)

    def testCodeDump(self):
        scope = base.VariableScope()
        scope.add('size', 10)
        scope.add('ratio', 0.5)
        scope.add('centered', True)
        cd = base.CodeDumper()
        scope.code_dump(cd)
        self.assertEqual(cd.writer.get(), 'size = 10;\nratio = 0.5;\ncentered = true;\n')


class BindingsTest(unittest.TestCase):

    def testReplaceWholeWithComponent(self):
        a = base.Variable('a', 1)
        b = base.Variable('b', 2)
        bindings = Bindings()
        bindings.add(Binding('size', 'size', a))
        bindings.add(Binding('width', 'size', b, 1))
        self.assertIsNone(bindings.get('size'))
        self.assertEqual(bindings.components('size'), {1: b})

    def testReplaceComponentsWithWhole(self):
        a = base.Variable('a', 1)
        b = base.Variable('b', 2)
        bindings = Bindings()
        bindings.add(Binding('length', 'size', a, 0))
        bindings.add(Binding('width', 'size', a, 1))
        bindings.add(Binding('size', 'size', b))
        self.assertEqual(bindings.components('size'), {})
        self.assertIs(bindings.get('size').variable, b)
        self.assertEqual(len(bindings), 1)

    def testClone(self):
        a = base.Variable('a', 1)
        bindings = Bindings()
        bindings.add(Binding('radius', 'r', a))
        cloned = bindings.clone()
        self.assertIsNot(cloned.get('r'), bindings.get('r'))
        self.assertIs(cloned.get('r').variable, a)
        cloned.add(Binding('radius', 'r', base.Variable('b', 2)))
        self.assertIs(bindings.get('r').variable, a)


class BindTest(unittest.TestCase):

    def testSphereRadius(self):
        r1 = base.Variable('r1', 3)
        sphere = base.Sphere().bind('radius', r1)
        self.assertIn('r = r1', str(sphere))
        self.assertNotIn('r = 3', str(sphere))
        self.assertEqual(sphere.r, 3)

    def testCaseInsensitive(self):
        n = base.Variable('n', 40)
        sphere = base.Sphere(2).bind('Resolution', n)
        self.assertEqual(str(sphere), 'sphere(r = 2, $fn = n);\n')
        self.assertEqual(sphere._fn, 40)

    def testSphereAllowList(self):
        a = base.Variable('a', 5)
        fs = base.Variable('fs', 0.5)
        sphere = base.Sphere().bind('minimumangle', a).bind('MinimumFragmentSize', fs)
        self.assertEqual(str(sphere), 'sphere(r = 1, $fa = a, $fs = fs);\n')

    def testUnknownProperty(self):
        r1 = base.Variable('r1', 3)
        self.assertRaisesRegex(
            base.UnknownBindableProperty,
            'No bindable property matching the name circumference was found for sphere',
            base.Sphere().bind,
            'circumference',
            r1,
        )
        self.assertRaises(base.UnknownBindableProperty, base.Cube().bind, 'radius', r1)
        self.assertRaises(
            base.UnknownBindableProperty, base.Translate([1, 0, 0]).bind, 'v', r1)

    def testSphereDiameter(self):
        d = base.Variable('d', 6)
        sphere = base.Sphere().bind('Diameter', d)
        self.assertEqual(str(sphere), 'sphere(r = (d / 2));\n')
        self.assertEqual(sphere.r, 3)
        self.assertEqual(sphere.diameter, 6)
        self.assertEqual(sphere.dumps(base.VariableScope(d)), 'd = 6;\n\nsphere(r = (d / 2));\n')

    def testSphereDiameterSetter(self):
        d = base.Variable('d', 10)
        sphere = base.Sphere()
        sphere.diameter = d
        self.assertEqual(str(sphere), 'sphere(r = (d / 2));\n')
        self.assertEqual(sphere.r, 5)
        sphere.bind('radius', base.Variable('r1', 2))
        self.assertEqual(str(sphere), 'sphere(r = r1);\n')

    def testSphereVariableStillBindsRadius(self):
        self.assertEqual(str(base.Sphere(base.Variable('r', 2))), 'sphere(r = r);\n')

    def testCubeComponents(self):
        w = base.Variable('w', 7)
        h = base.Variable('h', 9)
        cube = base.Cube((1, 2, 3)).bind('width', w).bind('HEIGHT', h)
        self.assertEqual(str(cube), 'cube(size = [1, w, h], center = false);\n')
        self.assertEqual(cube.size, base.Vector3(1, 7, 9))

    def testCubeWholeSizeReplacesComponents(self):
        w = base.Variable('w', 7)
        s = base.Variable('s', 5)
        cube = base.Cube().bind('width', w).bind('size', s)
        self.assertEqual(str(cube), 'cube(size = s, center = false);\n')
        self.assertEqual(cube.size, base.Vector3(5, 5, 5))
        cube.bind('length', w)
        self.assertEqual(str(cube), 'cube(size = [w, 5, 5], center = false);\n')

    def testCubeCenter(self):
        c = base.Variable('c', True)
        cube = base.Cube(2).bind('center', c)
        self.assertEqual(str(cube), 'cube(size = [2, 2, 2], center = c);\n')
        self.assertTrue(cube.center)
        self.assertEqual(cube.position(), base.Vector3())

    def testBindingSurvivesLiteralAssignment(self):
        r1 = base.Variable('r1', 3)
        sphere = base.Sphere().bind('radius', r1)
        sphere.r = 10
        self.assertEqual(str(sphere), 'sphere(r = r1);\n')
        self.assertEqual(sphere.bounds().top_right, base.Vector3(10, 10, 10))

    def testAssignVariableInConstructor(self):
        r = base.Variable('r', 4)
        sphere = base.Sphere(r)
        self.assertEqual(str(sphere), 'sphere(r = r);\n')
        self.assertEqual(sphere.r, 4)

    def testAssignVariableComponents(self):
        w = base.Variable('w', 4)
        cube = base.Cube((w * 2, 1, w))
        self.assertEqual(str(cube), 'cube(size = [(w * 2), 1, w], center = false);\n')
        self.assertEqual(cube.size, base.Vector3(8, 1, 4))

    def testAssignVariableWithSetter(self):
        n = base.Variable('n', 12)
        sphere = base.Sphere()
        sphere._fn = n
        self.assertEqual(str(sphere), 'sphere(r = 1, $fn = n);\n')

    def testAssignVariableToNonBindable(self):
        x = base.Variable('x', 1)
        self.assertRaises(base.UnknownBindableProperty, base.Translate, [x, 0, 0])

    def testVariableWithoutValue(self):
        r = base.Variable('r')
        sphere = base.Sphere(2).bind('radius', r)
        self.assertEqual(sphere.r, 2)
        self.assertEqual(str(sphere), 'sphere(r = r);\n')

    def testAssignVariableWithoutValueKeepsDefault(self):
        sphere = base.Sphere(base.Variable('r'))
        self.assertEqual(sphere.r, 1)
        self.assertEqual(
            sphere.bounds(), base.Bounds(base.Vector3(-1, -1, -1), base.Vector3(1, 1, 1)))
        self.assertEqual(str(sphere), 'sphere(r = r);\n')

        cube = base.Cube(base.Variable('s'))
        self.assertEqual(cube.size, base.Vector3(1, 1, 1))
        self.assertEqual(cube.position(), base.Vector3(0.5, 0.5, 0.5))

    def testAssignVariableWithoutValueKeepsCurrent(self):
        cube = base.Cube((2, 4, 6))
        cube.size = (base.Variable('l'), 5, base.Variable('h'))
        self.assertEqual(cube.size, base.Vector3(2, 5, 6))
        self.assertEqual(str(cube), 'cube(size = [l, 5, h], center = false);\n')
        sphere = base.Sphere(3)
        sphere.r = base.Variable('r')
        self.assertEqual(sphere.r, 3)

    def testFailedConversionRecordsNoBinding(self):
        cube = base.Cube(2)
        with self.assertRaises(base.InvalidValueForBool):
            cube.center = base.Variable('c', 1)
        self.assertEqual(str(cube), 'cube(size = [2, 2, 2], center = false);\n')
        self.assertEqual(len(cube.get_bindings()), 0)

        w = base.Variable('w', 3)
        with self.assertRaises(base.ConversionException):
            cube.size = (w, 1, 2, 3)
        self.assertEqual(str(cube), 'cube(size = [2, 2, 2], center = false);\n')
        self.assertEqual(cube.size, base.Vector3(2, 2, 2))

    def testFailedBindRecordsNoBinding(self):
        cube = base.Cube(2)
        with self.assertRaises(base.InvalidValueForBool):
            cube.bind('center', base.Variable('c', 1))
        self.assertEqual(str(cube), 'cube(size = [2, 2, 2], center = false);\n')


if __name__ == "__main__":
    unittest.main()
