import pint

ureg = pint.UnitRegistry()
Q_ = ureg.Quantity
