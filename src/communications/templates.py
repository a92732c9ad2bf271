from dataclasses import dataclass

from src.guests.dtos import CommunicationChannel, EventDTO, GuestDTO, OutboundMessageDTO


@dataclass
class EmailTemplates:
    INVITATION_SUBJECT = "You're Invited to {event_name}!"
    INVITATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #d4a373;">Save the Date!</h1>
        </div>

        <p>Dear {guest_name},</p>

        <p>We are delighted to invite you to {event_name}!</p>

        <div style="background-color: #fefae0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #bc6c25; margin-top: 0;">Wedding Details</h2>
            <p><strong>Date:</strong> {event_date}</p>
            <p><strong>Location:</strong> {event_location}</p>
        </div>

        <p>Please let us know if you can attend by clicking the button below:</p>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{rsvp_url}" style="background-color: #d4a373; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-size: 18px;">
                RSVP Now
            </a>
        </div>

        <p>If the button doesn't work, you can copy and paste the following link into your browser:</p>
        <p style="word-break: break-all; color: #606c38;"><a href="{rsvp_url}">{rsvp_url}</a></p>

        <p>{response_deadline_line}</p>

        <p>With love,<br>{couple_names}</p>
    </body>
    </html>
    """

    INVITATION_TEXT = """
    Dear {guest_name},

    We are delighted to invite you to {event_name}!

    Wedding Details:
    - Date: {event_date}
    - Location: {event_location}

    Please let us know if you can attend by visiting:
    {rsvp_url}

    {response_deadline_line}

    With love,
    {couple_names}
    """


def build_invitation_message(
    event: EventDTO, guest: GuestDTO, rsvp_url: str
) -> OutboundMessageDTO:
    if event.rsvp_deadline:
        deadline_line = f"We kindly ask that you respond by {event.rsvp_deadline:%B %d, %Y}."
    else:
        deadline_line = "We look forward to hearing from you!"

    values = {
        "guest_name": guest.full_name or "Guest",
        "event_name": event.name,
        "event_date": f"{event.start_date:%B %d, %Y}",
        "event_location": event.location,
        "rsvp_url": rsvp_url,
        "response_deadline_line": deadline_line,
        "couple_names": event.couple_names,
    }
    return OutboundMessageDTO(
        event_id=event.id,
        guest_id=guest.id,
        channel=CommunicationChannel.EMAIL,
        recipient=guest.email or "",
        subject=EmailTemplates.INVITATION_SUBJECT.format(**values),
        content=EmailTemplates.INVITATION_TEXT.format(**values),
        html_content=EmailTemplates.INVITATION_HTML.format(**values),
    )
