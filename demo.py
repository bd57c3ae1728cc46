import logging

import regressor

logging.basicConfig(level=logging.DEBUG)

data = [[1, 140], [2, 150], [3, 170], [4, 180]]

line = regressor.Regressor(5, data)
result = line.predict()

print("Observations: %s" % line.count)
print("x: %s" % result.x)
print("Predicted y: %s" % result.y)
print("PCC: %s" % result.pcc)

line.set(8)
print("Predicted y for 8: %s" % line.predict().y)
