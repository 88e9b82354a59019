class ChartError(Exception):
  """Base class for fatal errors raised while building a chart."""

  pass


class TransportError(ChartError):
  """The request to the data provider failed before a document was received."""

  pass


class ProviderError(ChartError):
  """The data provider answered with an explicit error document."""

  pass


class DecodeError(ChartError):
  """The provider document could not be turned into a bar sequence."""

  pass


class ConfigError(ChartError):
  """An environment setting has an unusable value."""

  pass
