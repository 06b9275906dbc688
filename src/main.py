from gspread import service_account

from clubsheets.gsheet import SpreadsheetClient
from clubsheets.reports import ReportRunner, load_report_modules
from clubsheets.shared.config import Config
from clubsheets.shared.logger import setup_logging
from clubsheets.shared.utils import sleep_for


def main(config: Config) -> None:
    logger = setup_logging(config.LOG_LEVEL)
    logger.info("Start running")

    load_report_modules(config.report_modules)

    gsheet_client = service_account(filename=config.KEYS_PATH)
    report_runner = ReportRunner(SpreadsheetClient(gsheet_client, logger=logger), logger=logger)
    report_runner.run_all(config.CONFIG_SPREADSHEET_ID, config.CONFIG_SHEET_NAME)

    logger.info("Completed processing all reports")


if __name__ == "__main__":
    config = Config.from_env()
    logger = setup_logging(config.LOG_LEVEL)
    logger.info("=== STARTING SCRIPT ===")

    while True:
        main(config)
        logger.info("=== SCRIPT COMPLETED ===")

        if config.RELAX_TIME_EACH_ROUND <= 0:
            break

        sleep_for(config.RELAX_TIME_EACH_ROUND)
