"""Configuration constants for the production forecasting analysis."""

# Seasonal period for monthly data (12 = yearly seasonality)
SEASONAL_PERIOD = 12

# Forecast horizon (number of months ahead)
FORECAST_MONTHS = 12

# Orders chosen from the ACF/PACF of the log, first and seasonally differenced series
DEFAULT_ORDER = (0, 1, 2)
DEFAULT_SEASONAL_ORDER = (0, 1, 1, SEASONAL_PERIOD)

# Lags for correlograms (three seasonal cycles)
DEFAULT_ACF_LAGS = 36

# Lags for the Ljung-Box residual independence test
DEFAULT_RESIDUAL_LAGS = 24

# Significance level for forecast intervals and residual tests
DEFAULT_ALPHA = 0.05

# Pandas frequency alias for month-start observations
MONTHLY_FREQ = "MS"

# COVID-era production collapse treated as outliers in the sensitivity analysis
COVID_OUTLIER_DATES = ["2020-04-01", "2020-05-01"]

# AIC difference below which two fits are considered equivalent
AIC_TOLERANCE = 2.0

# Date column in FRED production CSV downloads
DATE_COLUMN = "observation_date"
