import logging

from genesim import create_app


if __name__ == '__main__':
	logging.basicConfig(level=logging.INFO)
	app = create_app()
	# Use 0.0.0.0 so it is reachable from other devices if needed; debug on for development
	app.run(host='0.0.0.0', port=5000, debug=True)
