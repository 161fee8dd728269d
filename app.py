"""
Launch the VMake AI Bot server from a source checkout: `python app.py`.
"""

from vmake_ai_bot.__main__ import main

if __name__ == "__main__":
    main()
