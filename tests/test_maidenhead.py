import math
import unittest

from maidenhead import haversine_distance, is_valid_locator, to_location


class TestToLocation(unittest.TestCase):

    def test_four_char_is_centre_of_square(self):
        lat, lon = to_location('IO91')
        self.assertAlmostEqual(lat, 51.5)
        self.assertAlmostEqual(lon, -1.0)

    def test_six_char_is_centre_of_subsquare(self):
        lat, lon = to_location('IO91ab')
        self.assertAlmostEqual(lat, 51.0 + 1 / 24 + 1 / 48)
        self.assertAlmostEqual(lon, -2.0 + 1 / 24)

    def test_four_and_six_char_share_the_square(self):
        lat4, lon4 = to_location('IO91')
        lat6, lon6 = to_location('IO91ab')
        for lat in (lat4, lat6):
            self.assertTrue(51.0 <= lat < 52.0)
        for lon in (lon4, lon6):
            self.assertTrue(-2.0 <= lon < 0.0)

    def test_lowercase_matches_uppercase(self):
        self.assertEqual(to_location('io91wm'), to_location('IO91WM'))
        self.assertEqual(to_location(' jj00 '), to_location('JJ00'))

    def test_corners_stay_in_range(self):
        for loc in ('AA00aa', 'RR99xx', 'AR09ax', 'RA90xa'):
            lat, lon = to_location(loc)
            self.assertTrue(-180.0 <= lon < 180.0, loc)
            self.assertTrue(-90.0 <= lat < 90.0, loc)

    def test_deterministic(self):
        self.assertEqual(to_location('FN31pr'), to_location('FN31pr'))

    def test_bad_length_is_nan(self):
        for loc in ('', 'I', 'IO', 'IO9', 'IO91a', 'IO91abc', 'IO91ab12'):
            lat, lon = to_location(loc)
            self.assertTrue(math.isnan(lat), loc)
            self.assertTrue(math.isnan(lon), loc)

    def test_bad_characters_are_nan(self):
        for loc in ('ZZ99', 'IOAB', 'IO91zz', None, 1234):
            lat, lon = to_location(loc)
            self.assertTrue(math.isnan(lat) and math.isnan(lon), loc)

    def test_is_valid_locator(self):
        self.assertTrue(is_valid_locator('IO91'))
        self.assertTrue(is_valid_locator('io91wm'))
        self.assertFalse(is_valid_locator('IO9'))
        self.assertFalse(is_valid_locator(None))


class TestHaversine(unittest.TestCase):

    def test_quarter_great_circle(self):
        self.assertAlmostEqual(haversine_distance((0, 0), (0, 90)), 10007.5, delta=0.1)

    def test_same_point_is_zero(self):
        p = to_location('IO91wm')
        self.assertEqual(haversine_distance(p, p), 0.0)

    def test_symmetric(self):
        a = to_location('IO91wm')
        b = to_location('FN31pr')
        self.assertAlmostEqual(haversine_distance(a, b), haversine_distance(b, a))

    def test_london_to_paris(self):
        d = haversine_distance((51.5074, -0.1278), (48.8566, 2.3522))
        self.assertAlmostEqual(d, 343.5, delta=1.0)

    def test_antipodes_do_not_raise(self):
        half_circle = math.pi * 6371.0
        for a, b in (((-87.5, -179.0), (87.5, 1.0)), ((0.0, 0.0), (0.0, 180.0)), ((45.0, 10.0), (-45.0, -170.0))):
            self.assertAlmostEqual(haversine_distance(a, b), half_circle, delta=0.1)
        self.assertAlmostEqual(haversine_distance(to_location('AA02'), (87.5, 1.0)), half_circle, delta=0.1)

    def test_nan_propagates(self):
        self.assertTrue(math.isnan(haversine_distance(to_location('bad'), (0, 0))))
        self.assertTrue(math.isnan(haversine_distance((0, 0), (math.nan, math.nan))))


if __name__ == '__main__':
    unittest.main()
