import logging
from collections import namedtuple

import numpy

MIN_OBSERVATIONS = 4
PRECISION = 5

logger = logging.getLogger(__name__)

FitResult = namedtuple('FitResult', ['pcc', 'x', 'y'])


class DataError(Exception):
    """
    Raised when the dataset cannot support a fit

    """
    def __init__(self, message):
        super(DataError, self).__init__(message)
        self.message = message

    def __eq__(self, other):
        if not isinstance(other, DataError):
            return NotImplemented
        return self.message == other.message

    def __hash__(self):
        return hash(self.message)


def round_half_away(value, digits=PRECISION):
    """
    Rounds value to digits decimals. Ties go away from zero.

    @param value - Float
    @param digits - Int
    @return Float

    """
    scale = 10 ** digits
    scaled = numpy.abs(value) * scale
    whole = numpy.trunc(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return float(numpy.copysign(whole, value) / scale)


def linear_model(a, b):
    """
    Returns a lambda evaluating the line y = a + b * x

    @param a - Float - intercept
    @param b - Float - regression coefficient
    @return lambda

    """
    return lambda x: a + b * x


def _floats(values):
    return numpy.asarray(values, dtype=float)


def _constant(values):
    return numpy.ptp(_floats(values)) == 0


def _complete(observation):
    try:
        x, y = observation[0], observation[1]
    except (IndexError, KeyError, TypeError):
        return False
    return x is not None and y is not None


class Regressor(object):
    """
    Ordinary Least Squares(OLS) regression for a single predictor.
    Predicts y for a given x and reports Pearson's correlation
    coefficient of the dataset.

    """
    min_observations = MIN_OBSERVATIONS

    def __init__(self, x=None, data=None):
        """
        Inits the regressor

        @param x - value of the independent variable to predict y for
        @param data - collection of (x, y) observations

        """
        self.x = 0.0
        self.data = []
        self.x_values = []
        self.y_values = []
        self.count = 0
        self.set(self.x if x is None else x, data)

    def set(self, x, data=None):
        """
        Replaces the query and, when given, the dataset. Malformed
        observations are kept in data and count but left out of
        x_values and y_values; predict() reports the mismatch.

        @param x - Float
        @param data - collection of (x, y) observations

        """
        self.x = x
        if data is None:
            return

        self.data = list(data)
        self.count = len(self.data)
        self.x_values = []
        self.y_values = []
        for observation in self.data:
            if _complete(observation):
                self.x_values.append(observation[0])
                self.y_values.append(observation[1])

        logger.debug("dataset set: %d observations, %d complete",
                     self.count, len(self.x_values))

    def _mean(self, values):
        return numpy.sum(_floats(values)) / self.count

    def _square_sum(self, values):
        return numpy.sum(numpy.square(_floats(values)))

    def _sum_xy(self):
        return numpy.sum(_floats(self.x_values) * _floats(self.y_values))

    def _variability(self, values):
        """
        Population variance of one axis (divides by count)

        """
        return (self._square_sum(values) / self.count) - \
            (self._mean(values) ** 2)

    def _slope(self):
        mean_x = self._mean(self.x_values)
        mean_y = self._mean(self.y_values)
        return ((self._sum_xy() / self.count) - (mean_x * mean_y)) / \
            self._variability(self.x_values)

    def _intercept(self, b):
        """
        Intercept such that the line passes through the center of mass of
        the data points

        """
        return self._mean(self.y_values) - (b * self._mean(self.x_values))

    def _pcc(self, b):
        return b * (numpy.sqrt(self._variability(self.x_values)) /
                    numpy.sqrt(self._variability(self.y_values)))

    def _validate(self):
        if self.count < self.min_observations:
            raise DataError(
                "This dataset is too limited, provide at least %d "
                "observations." % self.min_observations
            )

        # x_values and y_values always share a length
        if self.count != len(self.x_values):
            raise DataError("Number of x and y in observations is unequal.")

        if _constant(self.x_values):
            raise DataError("Variance of x is zero, cannot fit a line.")

        if _constant(self.y_values):
            raise DataError(
                "Variance of y is zero, cannot compute the correlation."
            )

    def predict(self):
        """
        Fits a line to the dataset and predicts y for the stored x.
        Slope and intercept are rounded before they are used further.

        @return FitResult - (pcc, x, y)
        @raise DataError

        """
        self._validate()

        b = round_half_away(self._slope())
        a = round_half_away(self._intercept(b))
        model = linear_model(a, b)
        y = round_half_away(model(self.x))
        pcc = round_half_away(self._pcc(b))

        logger.debug("fitted y = %s + %s * x over %d observations",
                     a, b, self.count)
        return FitResult(pcc=pcc, x=self.x, y=y)
