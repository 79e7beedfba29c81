import os

import pandas as pd
from rich.console import Console
from rich.progress import track


class Pipeline:
    def __init__(self, output_dir="output"):
        self.console = Console()
        self.df = None
        self.output_dir = output_dir

    def output_path(self, file_name):
        return os.path.join(self.output_dir, file_name)

    def read_csv(self, csv_file_input):
        self.console.log(f"Reading {csv_file_input}...")
        self.df = pd.read_csv(csv_file_input, dtype=str, keep_default_na=False)
        self.console.log(f"Total number of rows: {len(self.df)}")
        return self.df

    def execute_action(self, action, column):
        # Applies an action to every row of the DataFrame and stores the result in column
        self.console.log(f"Running {action.__name__}...")
        rows = self.df.to_dict(orient='records')
        values = list(
            track(
                map(action, rows),
                total=len(self.df),
                description=f"Processing with {action.__name__}..."
            )
        )
        self.df[column] = values

    def save_csv(self, file_name, df=None):
        # Saves the DataFrame to a CSV file in the output directory.
        df = self.df if df is None else df
        os.makedirs(self.output_dir, exist_ok=True)
        path = self.output_path(file_name)
        self.console.log(f"Saving {len(df)} rows to {path}...")
        df.to_csv(path, index=False)
        return path
