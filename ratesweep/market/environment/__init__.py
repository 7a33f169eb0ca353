from ratesweep.market.environment.rates_environment import RatesEnvironment
