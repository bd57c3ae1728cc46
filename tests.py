import unittest

import numpy
from scipy import stats

import regressor


class TestRegressor(unittest.TestCase):

    def setUp(self):
        self.sut = regressor.Regressor()

    def gen_data(self):
        """
        Returns a small dataset with a known fit

        """
        return [[1, 140], [2, 150], [3, 170], [4, 180]]

    def gen_wikipedia_data(self):
        """
        Returns the height/weight sample from
            http://en.wikipedia.org/wiki/Simple_linear_regression

        """
        x_data = [
            1.47, 1.50, 1.52,
            1.55, 1.57, 1.60,
            1.63, 1.65, 1.68,
            1.70, 1.73, 1.75,
            1.78, 1.80, 1.83
        ]
        y_data = [
            52.21, 53.12, 54.48,
            55.84, 57.20, 58.57,
            59.93, 61.29, 63.11,
            64.47, 66.28, 68.10,
            69.92, 72.19, 74.46
        ]
        return (x_data, y_data)

    def assertDataError(self, message):
        with self.assertRaises(regressor.DataError) as ctx:
            self.sut.predict()
        self.assertEqual(ctx.exception.message, message)
        self.assertEqual(ctx.exception, regressor.DataError(message))

    def test_prediction_accuracy(self):
        """
        Tests the prediction and correlation for two queries over the
        same dataset. The correlation only depends on the dataset.

        """
        dataset = self.gen_data()
        self.sut.set(5, dataset)
        result = self.sut.predict()
        self.assertEqual(result.y, 195)
        self.assertEqual(result.pcc, 0.98995)
        self.assertEqual(result.x, 5)

        self.sut.set(8, dataset)
        result = self.sut.predict()
        self.assertEqual(result.y, 237)
        self.assertEqual(result.pcc, 0.98995)
        self.assertEqual(result.x, 8)

    def test_constructor(self):
        """
        Tests that constructing with a query and data is the same as
        calling set afterwards.

        """
        line = regressor.Regressor(5, self.gen_data())
        self.assertEqual(line.count, 4)
        self.assertEqual(line.x_values, [1, 2, 3, 4])
        self.assertEqual(line.y_values, [140, 150, 170, 180])
        self.assertEqual(line.predict(), regressor.FitResult(0.98995, 5, 195))

        empty = regressor.Regressor()
        self.assertEqual(empty.count, 0)
        self.assertEqual(empty.data, [])

    def test_too_few_observations(self):
        """
        Tests that less than 4 observations are rejected.

        """
        self.sut.set(5, [[1, 140], [2, 150]])
        self.assertDataError(
            "This dataset is too limited, provide at least 4 observations."
        )

    def test_empty_regressor(self):
        """
        Tests that predicting without data fails on the size check.

        """
        self.assertDataError(
            "This dataset is too limited, provide at least 4 observations."
        )

    def test_unequal_observations(self):
        """
        Tests that observations missing a coordinate are counted but not
        used, which makes predict fail.

        """
        for malformed in ([2], [], (2, None), [None, 150]):
            dataset = [[1, 140], malformed, [3, 170], [4, 180]]
            self.sut.set(5, dataset)
            self.assertEqual(self.sut.count, 4)
            self.assertEqual(len(self.sut.x_values), 3)
            self.assertEqual(len(self.sut.y_values), 3)
            self.assertEqual(self.sut.data, dataset)
            self.assertDataError(
                "Number of x and y in observations is unequal."
            )

    def test_size_checked_before_completeness(self):
        """
        Tests that the size check is reported first.

        """
        self.sut.set(5, [[1, 140], [], [3, 170]])
        self.assertDataError(
            "This dataset is too limited, provide at least 4 observations."
        )

    def test_zero_variance(self):
        """
        Tests that a constant axis is reported instead of dividing by zero.

        """
        self.sut.set(5, [[2, 140], [2, 150], [2, 170], [2, 180]])
        self.assertDataError("Variance of x is zero, cannot fit a line.")

        self.sut.set(5, [[1, 5], [2, 5], [3, 5], [4, 5]])
        self.assertDataError(
            "Variance of y is zero, cannot compute the correlation."
        )

    def test_zero_variance_float_constants(self):
        """
        Tests constant axes whose variance formula leaves a small
        positive residue instead of an exact zero.

        """
        for c in (-237.59152462357508, 694.8671, 0.1, 1.47):
            self.sut.set(5, [[c, 1], [c, 2], [c, 3], [c, 5], [c, 7]])
            self.assertDataError("Variance of x is zero, cannot fit a line.")

            self.sut.set(5, [[1, c], [2, c], [3, c], [5, c], [7, c]])
            self.assertDataError(
                "Variance of y is zero, cannot compute the correlation."
            )

    def test_set_idempotent(self):
        """
        Tests that setting the same arguments twice changes nothing.

        """
        self.sut.set(5, self.gen_data())
        once = self.sut.predict()
        self.sut.set(5, self.gen_data())
        self.sut.set(5, self.gen_data())
        self.assertEqual(self.sut.predict(), once)
        self.assertEqual(self.sut.count, 4)
        self.assertEqual(len(self.sut.x_values), 4)

    def test_set_replaces_dataset(self):
        """
        Tests that a new dataset fully replaces the previous one.

        """
        self.sut.set(5, [[1, 140], [2], [3, 170], [4, 180], [5, 190]])
        self.sut.set(5, [[1, 2], [2, 4], [3, 6], [4, 8]])
        self.assertEqual(self.sut.x_values, [1, 2, 3, 4])
        self.assertEqual(self.sut.y_values, [2, 4, 6, 8])
        self.assertEqual(self.sut.count, 4)
        result = self.sut.predict()
        self.assertEqual(result.y, 10)
        self.assertEqual(result.pcc, 1)

    def test_set_query_only(self):
        """
        Tests that set without data keeps the dataset and moves the query.

        """
        self.sut.set(5, self.gen_data())
        self.sut.set(8)
        self.assertEqual(self.sut.count, 4)
        self.assertEqual(self.sut.predict().y, 237)

    def test_predict_does_not_mutate(self):
        """
        Tests that predict leaves the instance untouched.

        """
        self.sut.set(5, self.gen_data())
        before = dict(vars(self.sut))
        self.sut.predict()
        self.sut.predict()
        self.assertEqual(vars(self.sut), before)

    def test_extra_elements_ignored(self):
        """
        Tests that elements past the first two are ignored.

        """
        self.sut.set(5, [[1, 140, 0], [2, 150, 0], [3, 170], [4, 180, 9]])
        self.assertEqual(self.sut.predict(), regressor.FitResult(0.98995, 5, 195))

    def test_negative_correlation(self):
        """
        Tests a perfectly decreasing dataset.

        """
        self.sut.set(0, [(1, 8), (2, 6), (3, 4), (4, 2)])
        result = self.sut.predict()
        self.assertEqual(result.pcc, -1)
        self.assertEqual(result.y, 10)

    def test_wikipedia_example(self):
        """
        Tests the fit against scipy on the wikipedia sample.

        """
        x_data, y_data = self.gen_wikipedia_data()
        self.sut.set(1.9, list(zip(x_data, y_data)))
        result = self.sut.predict()

        fit = stats.linregress(x_data, y_data)
        r, _ = stats.pearsonr(x_data, y_data)
        self.assertTrue(numpy.isclose(result.pcc, r))
        self.assertTrue(numpy.isclose(result.pcc, fit.rvalue))
        self.assertTrue(
            numpy.isclose(result.y, fit.intercept + fit.slope * 1.9)
        )

    def test_min_observations_override(self):
        """
        Tests that a subclass can lower the minimum number of observations.

        """
        class SmallRegressor(regressor.Regressor):
            min_observations = 2

        line = SmallRegressor(3, [[1, 2], [2, 4]])
        self.assertEqual(line.predict().y, 6)

        line.set(3, [[1, 2]])
        with self.assertRaises(regressor.DataError) as ctx:
            line.predict()
        self.assertEqual(
            ctx.exception.message,
            "This dataset is too limited, provide at least 2 observations."
        )

    def test_logging(self):
        """
        Tests that set and predict log at debug level.

        """
        with self.assertLogs('regressor', level='DEBUG') as logs:
            self.sut.set(5, self.gen_data())
            self.sut.predict()
        self.assertEqual(len(logs.records), 2)
        self.assertIn('4 observations, 4 complete', logs.output[0])


class TestRounding(unittest.TestCase):

    def test_precision(self):
        """
        Tests rounding to five decimals.

        """
        self.assertEqual(regressor.round_half_away(0.989949493661), 0.98995)
        self.assertEqual(regressor.round_half_away(14.0), 14.0)
        self.assertEqual(regressor.round_half_away(-1.234564), -1.23456)

    def test_ties_away_from_zero(self):
        """
        Tests that ties are rounded away from zero, unlike round().

        """
        self.assertEqual(regressor.round_half_away(2.5, 0), 3.0)
        self.assertEqual(regressor.round_half_away(-2.5, 0), -3.0)
        self.assertEqual(regressor.round_half_away(0.125, 2), 0.13)
        self.assertEqual(regressor.round_half_away(-0.125, 2), -0.13)

    def test_just_below_tie(self):
        """
        Tests that values just below a tie round toward zero.

        """
        self.assertEqual(regressor.round_half_away(0.49999999999999994, 0),
                         0.0)
        self.assertEqual(regressor.round_half_away(-0.49999999999999994, 0),
                         -0.0)
        self.assertEqual(regressor.round_half_away(1.4999999999999998, 0),
                         1.0)

    def test_returns_float(self):
        self.assertIsInstance(regressor.round_half_away(numpy.float64(1.5)),
                              float)


class TestLinearModel(unittest.TestCase):

    def test_line(self):
        model = regressor.linear_model(125, 14)
        self.assertEqual(model(5), 195)
        self.assertEqual(model(0), 125)


if __name__ == '__main__':
    unittest.main()
