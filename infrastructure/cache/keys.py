from datetime import date


class CacheKeys:
	@staticmethod
	def latest_rates(base_currency: str) -> str:
		return f'latest:{base_currency}'

	@staticmethod
	def conversion_rate(source_currency: str, target_currency: str) -> str:
		return f'convert:{source_currency}:{target_currency}'

	@staticmethod
	def historical_rates(base_currency: str, start_date: date, end_date: date) -> str:
		return f'historical:{base_currency}:{start_date:%Y-%m-%d}:{end_date:%Y-%m-%d}'
