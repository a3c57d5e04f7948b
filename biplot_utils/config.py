"""
Biplot Configuration Constants

Package-level defaults shared by the calculation and plotting modules.
"""

# Components drawn when the caller does not choose (1-based)
DEFAULT_COMPONENTS = (1, 2)

# Rounding applied to the variance explained percentages
VARIANCE_DECIMALS = 2

# Column names of the derived tables
VARIABLES_COLUMN = 'variables'
ORIGIN_COLUMN = 'origin'
NAMES_COLUMN = 'names'

# Default names when the PCA result carries none
COMPONENT_PREFIX = 'PC'
VARIABLE_PREFIX = 'Var'

# Layer colors
VARIABLE_COLOR = 'red'
ARROW_COLOR = 'red'
CASE_COLOR = 'blue'

# Arrowhead style (plotly annotation settings)
ARROW_HEAD = 2
ARROW_SIZE = 1
ARROW_WIDTH = 1.5

# Axis title, e.g. "PC1 (45.12% explained var.)"
AXIS_LABEL_TEMPLATE = '{component} ({percent:.2f}% explained var.)'
